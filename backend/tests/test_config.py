import os

from config import Settings

def test_paths_default_under_user_data_dir(tmp_path):
    s = Settings(USER_DATA_DIR=str(tmp_path), DB_PATH=None, STORAGE_DIR=None, TUNESHELF_LOG_DIR=None)
    assert s.DB_PATH == os.path.join(str(tmp_path), "tuneshelf.duckdb")
    assert s.STORAGE_DIR == os.path.join(str(tmp_path), "uploads")
    assert s.TUNESHELF_LOG_DIR == os.path.join(str(tmp_path), "logs")
    assert s.database_url == f"duckdb:///{s.DB_PATH}"

def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "custom.duckdb"))
    monkeypatch.setenv("MAX_TRACK_UPLOAD_BYTES", "1234")
    s = Settings()
    assert s.DB_PATH == str(tmp_path / "custom.duckdb")
    assert s.MAX_TRACK_UPLOAD_BYTES == 1234

def test_setup_environment_exports_log_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("TUNESHELF_LOG_DIR", raising=False)
    s = Settings(TUNESHELF_LOG_DIR=str(tmp_path / "logs"))
    s.setup_environment()
    assert os.environ["TUNESHELF_LOG_DIR"] == str(tmp_path / "logs")
