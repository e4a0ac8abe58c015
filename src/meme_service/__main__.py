import uvicorn


def main() -> None:
    from meme_service.main import app, config

    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)


if __name__ == "__main__":
    main()
