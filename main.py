from loguru import logger

from crystal_mcp.cli import app


def main() -> None:
    logger.debug("Launching crystal-mcp CLI")
    app()


if __name__ == "__main__":
    main()
