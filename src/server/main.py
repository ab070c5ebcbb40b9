"""Run the persistent listener with uvicorn."""

import uvicorn

from core.utils.settings import get_port
from server.app import create_app

app = create_app()


def main() -> None:
    uvicorn.run(app, host="0.0.0.0", port=get_port())


if __name__ == "__main__":
    main()
