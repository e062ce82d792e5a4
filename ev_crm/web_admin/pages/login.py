from nicegui import ui

from ev_crm.config import settings
from ev_crm.web_admin.components.widgets import notify_result
from ev_crm.web_admin.controllers import LoginController
from ev_crm.web_admin.session import page_gateway


async def login_page():
    controller = LoginController(page_gateway())

    async def do_login():
        result = await controller.login(email.value, password.value)
        if result.success:
            ui.navigate.to('/')
        else:
            notify_result(False, result.message)

    with ui.card().classes('absolute-center w-96'):
        ui.label(settings.web_admin.TITLE).classes('text-h5')
        email = ui.input('Email').classes('w-full')
        password = ui.input('Password', password=True, password_toggle_button=True).classes('w-full')
        password.on('keydown.enter', do_login)
        ui.button('Login', on_click=do_login).classes('w-full')
