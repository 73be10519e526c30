from __future__ import annotations

import argparse
import asyncio
from contextlib import asynccontextmanager
import logging
from pathlib import Path
import signal
from typing import Any, Sequence

from websight.adapters.container.app_container import AppContainer


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="websight", description="Browser automation tools over MCP stdio.")
    parser.add_argument("--config", type=str, default=None, help="Optional config.toml path.")
    return parser


async def run(config_path: str | None = None) -> None:
    resolved_config_path = Path(config_path).expanduser() if config_path else None
    AppContainer.configure(resolved_config_path)
    logger = AppContainer.get_logger()
    server = AppContainer.get_server()
    session = AppContainer.get_browser_session()
    logger.info(
        "tool configuration loaded",
        extra={"tools_enabled": ",".join(server.tool_names) or "none"},
    )
    logger.info("booting websight", extra={"component": "daemon"})

    async with _graceful_shutdown([session], logger) as stop_event:
        serve_task = asyncio.create_task(server.serve_stdio())
        stop_task = asyncio.create_task(stop_event.wait())
        done, pending = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if serve_task in done:
            # stdin closed or the transport failed
            serve_task.result()
            logger.info("stdio transport closed", extra={"component": "daemon"})


@asynccontextmanager
async def _graceful_shutdown(services: Sequence[Any], logger: logging.Logger):
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _on_signal(_: int) -> None:
        logger.info("received stop signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _on_signal, sig)

    try:
        yield stop_event
    finally:
        logger.info("shutting down services", extra={"component": "daemon"})
        for service in services:
            await service.close()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    asyncio.run(run(args.config))


if __name__ == "__main__":
    main()
