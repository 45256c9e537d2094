from dotenv import load_dotenv
load_dotenv()

import uvicorn

from canonkeeper.app import app


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
