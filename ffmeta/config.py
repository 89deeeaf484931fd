"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- Supabase ---
# スクレイプ経路だけで動かす場合は未設定でよい (クライアント生成時に検査)
SUPABASE_URL: str = os.environ.get("SUPABASE_URL", "")
SUPABASE_SECRET_KEY: str = os.environ.get("SUPABASE_SECRET_KEY", "")
FFLOGS_TABLE: str = os.environ.get("FFLOGS_TABLE", "fflogs_data")

# --- /api/fflogs の提供元 ("scrape" or "store") ---
FFLOGS_SOURCE: str = os.environ.get("FFLOGS_SOURCE", "scrape")

# --- FFLogs 統計ページ ---
FFLOGS_BASE_URL = "https://www.fflogs.com"
STATISTICS_PATH_TEMPLATE = "/zone/statistics/{zone_id}"
CLASS_FILTER = "Any"
DATASET_SIZE = 50

# 受け付けるゾーン ID
ALLOWED_ZONES = (65, 68)

# ダッシュボードが扱うゾーン・ボス
SAVAGE_ZONE = 68
ULTIMATE_ZONE = 65
SAVAGE_BOSSES = (97, 98, 99, 100)

ZONES = {
    SAVAGE_ZONE: {"name": "Savage", "bosses": SAVAGE_BOSSES},
    ULTIMATE_ZONE: {"name": "Ultimate", "bosses": ()},
}

# --- ブラウザ設定 ---
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
PAGE_TIMEOUT_MS = 20_000
TABLE_TIMEOUT_MS = 10_000
SETTLE_MS = 1_000  # テーブル出現後の描画待ち

# --- サーバー ---
SERVER_HOST: str = os.environ.get("FFMETA_HOST", "127.0.0.1")
SERVER_PORT: int = int(os.environ.get("FFMETA_PORT", "5000"))

# --- ログ ---
LOG_DIR = Path(os.environ.get("FFMETA_LOG_DIR", _PROJECT_ROOT / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
