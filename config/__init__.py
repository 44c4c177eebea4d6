import os
from typing import Optional

# Giá trị APP_ENV -> module cấu hình tương ứng
_SETTINGS_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    # Lấy môi trường từ tham số hoặc biến APP_ENV, mặc định là 'development'
    env = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return _SETTINGS_MODULES.get(env, "config.development")
