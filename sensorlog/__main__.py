"""Entry point: serve the HTTP API with uvicorn."""

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the sensor log API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    uvicorn.run("sensorlog.main:app", host=args.host, port=args.port, proxy_headers=True)


if __name__ == "__main__":
    main()
