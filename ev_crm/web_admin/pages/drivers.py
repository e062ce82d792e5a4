from nicegui import ui

from ev_crm.core.forms.driver_form import DRIVER_ASSET_FIELDS
from ev_crm.web_admin.components.widgets import (
    cell_text,
    details_card,
    form_input,
    notify_result,
    pager,
    sort_header,
)
from ev_crm.web_admin.controllers import DriverRosterController

COLUMNS = [
    ('driver_id', 'ID'),
    ('name', 'Name'),
    ('cnic_number', 'CNIC'),
    ('contact_number', 'Contact'),
    ('allocated_rikshaw', 'Rickshaw'),
    ('dob', 'Date of birth'),
    ('registered_at', 'Registered'),
]

DETAIL_FIELDS = COLUMNS + [('current_address', 'Address')]

COMPLAINT_COLUMNS = [
    ('complaint_id', 'ID'),
    ('complaint_name', 'Title'),
    ('type', 'Type'),
    ('status', 'Status'),
]


async def drivers_page(controller: DriverRosterController):
    form = controller.form
    roster = controller.roster
    inputs = {}
    uploads = []

    async def register():
        result = await controller.register()
        for element in inputs.values():
            element.validate()
        notify_result(result.success, result.message)
        if result.success:
            for name, element in inputs.items():
                element.value = form.value(name)
            for upload in uploads:
                upload.reset()
            roster_view.refresh()

    def upload_handler(field):
        async def handler(e):
            await controller.upload(field, e.content.read(), e.name)
        return handler

    def on_sort(column):
        roster.sort(column)
        roster_view.refresh()

    def on_page(page):
        roster.set_page(page)
        roster_view.refresh()

    def on_search(e):
        roster.search(e.value)
        roster_view.refresh()

    async def show_details(record):
        await controller.open_details(record)
        with ui.dialog() as dialog, ui.card().classes('min-w-[32rem]'):
            details_card(record, DETAIL_FIELDS)
            ui.label('Complaints').classes('text-h6')
            if not controller.driver_complaints:
                ui.label('No complaints.').classes('text-grey-7')
            for complaint in controller.driver_complaints:
                ui.label(' | '.join(cell_text(complaint, c) for c, _ in COMPLAINT_COLUMNS))
            ui.button('Close', on_click=dialog.close)
        dialog.on('hide', lambda: roster.select(None))
        dialog.open()

    @ui.refreshable
    def roster_view():
        if controller.error_message:
            ui.label(controller.error_message).classes('text-negative')
        with ui.grid(columns=len(COLUMNS) + 1).classes('w-full items-center'):
            sort_header(roster, COLUMNS, on_sort)
            ui.label('')
            for record in roster.page_items:
                for column, _ in COLUMNS:
                    ui.label(cell_text(record, column))
                ui.button(icon='visibility', on_click=lambda r=record: show_details(r)).props('flat dense')
        pager(roster, on_page)

    ui.markdown('## Drivers')
    with ui.expansion('Register driver', icon='person_add').classes('w-full'):
        with ui.grid(columns=2).classes('w-full gap-4'):
            inputs['name'] = form_input(form, 'name', 'Full name')
            inputs['contact_number'] = form_input(form, 'contact_number', 'Contact number (11 digits)')
            inputs['dob'] = form_input(form, 'dob', 'Date of birth').props('type=date stack-label')
            inputs['cnic_number'] = form_input(form, 'cnic_number', 'CNIC (13 digits)')
            inputs['current_address'] = form_input(form, 'current_address', 'Current address')
            inputs['allocated_rikshaw'] = form_input(form, 'allocated_rikshaw', 'Allocated rickshaw')
            for field in DRIVER_ASSET_FIELDS:
                uploads.append(
                    ui.upload(label=field.replace('_', ' ').title(), auto_upload=True,
                              on_upload=upload_handler(field)).props('accept=image/*')
                )
        ui.button('Register', on_click=register)

    ui.input('Search', on_change=on_search).props('clearable').classes('w-64')
    roster_view()

    if not await controller.refresh():
        notify_result(False, controller.error_message)
    roster_view.refresh()
