import os
import uvicorn


def start_server():
    config = uvicorn.Config(
        "storefront_service.app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 5000)),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
    server = uvicorn.Server(config)
    server.run()


if __name__ == "__main__":
    try:
        start_server()
    except KeyboardInterrupt:
        print("\nShutting down server...")
