import uvicorn

from arcade.core.config import settings


if __name__ == "__main__":
    uvicorn.run("arcade.main:app", host=settings.HOST, port=settings.PORT, reload=True)
