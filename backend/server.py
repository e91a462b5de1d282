import os
import uvicorn

if __name__ == "__main__":
    # 設定の読み込みと環境変数のセットアップ
    # これを最初に行うことで、後続のインポート(logger 等)が正しいログディレクトリを使用できる
    from config import settings
    settings.setup_environment()

    # アプリケーションデータディレクトリの確保
    os.makedirs(settings.USER_DATA_DIR, exist_ok=True)

    from main import app

    port = int(os.environ.get("TUNESHELF_PORT", settings.TUNESHELF_PORT))
    host = os.environ.get("TUNESHELF_HOST", "0.0.0.0")

    print(f"Starting {settings.APP_NAME} Backend Server on {host}:{port}...")
    print(f"User Data Directory: {settings.USER_DATA_DIR}")
    print(f"Database: {settings.DB_PATH}")
    print(f"Storage: {settings.STORAGE_DIR}")

    uvicorn.run(app, host=host, port=port, reload=False, workers=1)
