import uvicorn

from .backend.server import create_app
from .search.config import SearchServiceConfig


def main() -> None:
    config = SearchServiceConfig.from_environment()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
