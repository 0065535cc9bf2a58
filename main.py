import os

from dotenv import load_dotenv

load_dotenv()

from januzzi.log import configurar_logs  # noqa: E402
from januzzi.routes.main import app  # noqa: E402

configurar_logs()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
