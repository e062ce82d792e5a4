import os

# Настройка пути хранения локальных данных NiceGUI (чтобы не создавать папку .nicegui в корне)
os.environ.setdefault('NICEGUI_STORAGE_PATH', '/tmp/ev_crm_nicegui_admin')

from nicegui import app, ui
from ev_crm.config import settings
from ev_crm.common.constants import TypeMsg
from ev_crm.common.logger import log_info
from ev_crm.web_admin.components.sidebar import create_layout
from ev_crm.web_admin.controllers import ComplaintRosterController, DriverRosterController, LoginController
from ev_crm.web_admin.pages.complaints import complaints_page
from ev_crm.web_admin.pages.drivers import drivers_page
from ev_crm.web_admin.pages.login import login_page
from ev_crm.web_admin.session import page_gateway, require_login


def create_app() -> None:

    def layout(gateway):
        async def logout():
            await LoginController(gateway).logout()
            ui.navigate.to('/login')

        create_layout(logout)

    @ui.page('/login')
    async def page_login():
        await login_page()

    @ui.page('/')
    async def page_complaints():
        if not require_login():
            return
        gateway = page_gateway()
        layout(gateway)
        await complaints_page(ComplaintRosterController(gateway))

    @ui.page('/drivers')
    async def page_drivers():
        if not require_login():
            return
        gateway = page_gateway()
        layout(gateway)
        await drivers_page(DriverRosterController(gateway))

    @app.on_startup
    async def startup() -> None:
        await log_info("EV CRM console started", type_msg=TypeMsg.INFO)


def run_web(host: str = "0.0.0.0", port: int = 8081, reload: bool = False) -> None:
    create_app()
    ui.run(
        host=host,
        port=port,
        reload=reload,
        title=settings.web_admin.TITLE,
        storage_secret=settings.web_admin.STORAGE_SECRET,
    )
