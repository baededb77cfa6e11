from vidshare.api.app import create_app
from vidshare.config import load_settings

settings = load_settings()
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
