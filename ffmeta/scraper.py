"""FFLogs 統計ページのスクレイピングモジュール.

取得手順 (1 リクエスト = 1 ブラウザ, すべて逐次):
  1. ヘッドレス Chromium を起動
  2. 統計ページへ遷移
  3. table 要素の出現を待機 (タイムアウトあり)
  4. 描画完了まで一定時間待機
  5. 描画後の DOM から行を抽出
  6. page → browser の順に必ず閉じる (失敗は握りつぶしてログのみ)
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from bs4 import BeautifulSoup
from playwright.sync_api import sync_playwright

from ffmeta.assembler import assemble
from ffmeta.config import (
    BROWSER_ARGS,
    CLASS_FILTER,
    DATASET_SIZE,
    FFLOGS_BASE_URL,
    PAGE_TIMEOUT_MS,
    SETTLE_MS,
    STATISTICS_PATH_TEMPLATE,
    TABLE_TIMEOUT_MS,
)
from ffmeta.models import JobRecord, ResultSet

logger = logging.getLogger(__name__)

# データ行の目印 (ヘッダー・フッター行には付かない)
ROW_SELECTOR = "tr.odd, tr.even"
BOSS_LABEL_SELECTOR = "#filter-boss-text"
ZONE_LABEL_SELECTOR = "a.zone-name"
MIN_CELLS = 4


def build_statistics_url(zone_id: int, boss_id: int | str | None = None) -> str:
    """統計ページの URL を組み立てる."""
    params = {"class": CLASS_FILTER, "dataset": DATASET_SIZE}
    if boss_id:
        params["boss"] = boss_id
    path = STATISTICS_PATH_TEMPLATE.format(zone_id=zone_id)
    return f"{FFLOGS_BASE_URL}{path}?{urlencode(params)}"


def render_page(
    zone_id: int, boss_id: int | str | None = None, *, playwright_factory=None
) -> str:
    """統計ページを開いて描画後の HTML を返す.

    起動・遷移・待機の失敗はそのまま送出する (リトライしない)。
    後始末は成功・失敗どちらでも必ず行う。
    """
    url = build_statistics_url(zone_id, boss_id)
    logger.info("統計ページ取得: %s", url)

    factory = playwright_factory or sync_playwright
    with factory() as p:
        browser = None
        page = None
        try:
            browser = p.chromium.launch(headless=True, args=BROWSER_ARGS)
            page = browser.new_page()
            page.set_default_timeout(PAGE_TIMEOUT_MS)
            page.goto(url, wait_until="domcontentloaded")
            page.wait_for_selector("table", timeout=TABLE_TIMEOUT_MS)
            # テーブル出現後もクライアント側の描画が続くため少し待つ
            page.wait_for_timeout(SETTLE_MS)

            html = page.content()
        finally:
            _close_quietly(page, "page")
            _close_quietly(browser, "browser")

    return html


def acquire(
    zone_id: int, boss_id: int | str | None = None, **kwargs
) -> tuple[list[JobRecord], str]:
    """統計ページを開いて (行リスト, ページラベル) を返す."""
    html = render_page(zone_id, boss_id, **kwargs)
    rows = extract_rows(html)
    label = extract_label(html, has_boss=bool(boss_id))
    logger.info("取得完了: %d 行, label=%s", len(rows), label)
    return rows, label


def _close_quietly(resource, name: str) -> None:
    """page/browser を閉じる. 失敗してもログのみで送出しない."""
    if resource is None:
        return
    try:
        resource.close()
    except Exception as e:
        logger.warning("%s のクローズに失敗: %s", name, e)


def extract_rows(html: str) -> list[JobRecord]:
    """統計テーブルの HTML から行を抽出する.

    セル 0 → job, セル 1 → score, セル 3 → count (セル 2 は表示専用列)。
    セル数が足りない行は捨てる。並べ替え・重複除去はしない。
    """
    soup = BeautifulSoup(html, "html.parser")
    rows: list[JobRecord] = []

    for tr in soup.select(ROW_SELECTOR):
        cells = tr.find_all("td")
        if len(cells) < MIN_CELLS:
            logger.debug("セル数不足の行をスキップ: %d セル", len(cells))
            continue
        rows.append(JobRecord(
            job=_cell_text(cells[0]),
            score=_cell_text(cells[1]),
            count=_cell_text(cells[3]),
        ))

    return rows


def extract_label(html: str, has_boss: bool = False) -> str:
    """ページの見出し (ボス名 or ゾーン名) を抽出する. 見つからなければ空文字."""
    soup = BeautifulSoup(html, "html.parser")
    label = ""
    if has_boss:
        label = _select_text(soup, BOSS_LABEL_SELECTOR)
    if not label:
        label = _select_text(soup, ZONE_LABEL_SELECTOR)
    return label


def extract_boss_name(html: str) -> str:
    """ボス名の見出しだけを抽出する. ゾーン名にはフォールバックしない."""
    return _select_text(BeautifulSoup(html, "html.parser"), BOSS_LABEL_SELECTOR)


def _select_text(soup: BeautifulSoup, selector: str) -> str:
    el = soup.select_one(selector)
    return el.get_text(strip=True) if el else ""


def _cell_text(cell) -> str:
    return cell.get_text(" ", strip=True)


def fetch_result(zone_id: int, boss_id: int | str | None = None, **kwargs) -> ResultSet:
    """統計ページを取得して ResultSet まで組み立てる."""
    html = render_page(zone_id, boss_id, **kwargs)
    rows = extract_rows(html)
    label = extract_label(html, has_boss=bool(boss_id))
    boss_name = extract_boss_name(html) if boss_id else ""
    logger.info("取得完了: %d 行, label=%s", len(rows), label)
    return assemble(
        zone_id, label, rows, boss_id,
        url=build_statistics_url(zone_id, boss_id),
        boss_name=boss_name or None,
    )
