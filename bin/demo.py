#!/usr/bin/env python3
"""restbind demo.

Builds a proxy for a two-level resource and calls a sub-resource through a
locator. The base URL comes from RESTBIND_BASE_URL (default
http://localhost:8080/api).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Annotated

# Add the python source directory to the path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import httpx

from restbind import GET, ClientConfig, Path, PathParam, RestClient

log_level = os.environ.get("RESTBIND_LOG_LEVEL", "debug").upper()
if log_level == "TRACE":
    log_level = "DEBUG"
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
logger = logging.getLogger("restbind-demo")

DEFAULT_BASE_URL = "http://localhost:8080/api"


class Dummy2:
    @GET
    @Path("the")
    def the(self) -> None: ...


class Dummy:
    @GET
    @Path("hello")
    def hello(self) -> None: ...

    @GET
    @Path("world/{name}")
    def world(self, name: Annotated[str, PathParam("name")]) -> None: ...

    @Path("what")
    def what(self) -> Dummy2: ...


def main() -> int:
    """Run the demo call chain."""
    overrides = {"base_url": os.environ.get("RESTBIND_BASE_URL", DEFAULT_BASE_URL)}
    if "RESTBIND_LOG_LEVEL" not in os.environ:
        overrides["log_level"] = "debug"
    config = ClientConfig.from_env(**overrides)
    with RestClient(config) as client:
        dummy = client.proxy(Dummy)
        try:
            dummy.what().the()
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {e}")
            return 1
    logger.info("Demo finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
