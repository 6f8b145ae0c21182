# final_buzzer/main.py
import os, sys
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
import flet as ft

from core.logs import configure_logging, get_logger
from core.settings import APP_NAME, UI
from storage.config import AppConfig, ensure_config
from storage.store import ClientStorageStore, KeyValueStore, SqliteStore
from ui.app_shell import AppShell

log = get_logger("main")


def build_store(page: ft.Page, config: AppConfig) -> KeyValueStore:
    backend = config.store_backend
    if backend == "auto":
        backend = "client" if getattr(page, "web", False) else "sqlite"
    log.info("Using %s store", backend)
    if backend == "client":
        return ClientStorageStore(page.client_storage)
    return SqliteStore()


def main(page: ft.Page):
    config = ensure_config()
    configure_logging(config.log_level)

    page.title = UI.app_title
    page.theme_mode = UI.theme_mode
    page.theme = ft.Theme(color_scheme_seed=UI.color_scheme_seed)
    page.appbar = ft.AppBar(title=ft.Text(APP_NAME), center_title=False)
    page.window.min_width = UI.window_min_width
    page.window.min_height = UI.window_min_height

    shell = AppShell(page, build_store(page, config), config)
    shell.mount()


def run():
    ft.app(target=main)


if __name__ == "__main__":
    run()
