import uvicorn

from api.app import create_app

app = create_app()


if __name__ == "__main__":
    config = app.state.config
    uvicorn.run(app, host=config.api.host, port=config.api.port)
