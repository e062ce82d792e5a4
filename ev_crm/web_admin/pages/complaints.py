from nicegui import ui

from ev_crm.config import settings
from ev_crm.web_admin.components.widgets import (
    cell_text,
    details_card,
    form_input,
    notify_result,
    pager,
    sort_header,
)
from ev_crm.web_admin.controllers import ComplaintRosterController

COLUMNS = [
    ('complaint_id', 'ID'),
    ('ev_id', 'EV'),
    ('driver_name', 'Driver'),
    ('driver_cnic', 'CNIC'),
    ('type', 'Type'),
    ('status', 'Status'),
    ('complaint_register_time', 'Registered'),
]

DETAIL_FIELDS = COLUMNS + [
    ('complaint_name', 'Title'),
    ('description', 'Description'),
    ('driver_number', 'Phone'),
    ('status_change_time', 'Status changed'),
]


async def complaints_page(controller: ComplaintRosterController):
    form = controller.form
    roster = controller.roster
    inputs = {}

    def sync_inputs():
        for name, element in inputs.items():
            element.value = form.value(name)

    async def verify():
        result = await controller.verify_cnic(inputs['cnic'].value)
        sync_inputs()
        if form.no_data_found or not result.success:
            notify_result(False, result.message)
        driver_card.refresh()

    async def submit():
        result = await controller.submit()
        for element in inputs.values():
            element.validate()
        notify_result(result.success, result.message)
        if result.success:
            sync_inputs()
            upload.reset()
            driver_card.refresh()
            roster_view.refresh()

    async def on_upload(e):
        await controller.upload('driver_image', e.content.read(), e.name)

    def on_sort(column):
        roster.sort(column)
        roster_view.refresh()

    def on_page(page):
        roster.set_page(page)
        roster_view.refresh()

    def on_search(e):
        roster.search(e.value)
        roster_view.refresh()

    def begin_edit(index):
        controller.begin_edit(index)
        roster_view.refresh()

    async def cancel_edit():
        await controller.cancel_edit()
        roster_view.refresh()

    async def commit_edit(draft):
        result = await controller.commit_edit(draft)
        notify_result(result.success, result.message)
        roster_view.refresh()

    async def delete(record):
        result = await controller.delete(record)
        notify_result(result.success, result.message)
        roster_view.refresh()

    async def show_details(record):
        complaint = await controller.open_details(record.get('complaint_id')) or record
        with ui.dialog() as dialog, ui.card():
            details_card(complaint, DETAIL_FIELDS)
            ui.button('Close', on_click=dialog.close)
        dialog.open()

    @ui.refreshable
    def driver_card():
        if form.lookup_failed:
            ui.label('Driver lookup failed.').classes('text-negative')
        elif form.no_data_found:
            ui.label('No data found for this CNIC.').classes('text-warning')
        elif form.driver_details is not None:
            with ui.card().classes('w-full'):
                details_card(form.driver_details, [
                    ('name', 'Name'),
                    ('contact_number', 'Contact'),
                    ('allocated_rikshaw', 'Rickshaw'),
                    ('current_address', 'Address'),
                ])

    def edit_row(record):
        draft = record.to_payload()

        def bind(name):
            return lambda e: draft.__setitem__(name, e.value)

        for column, label in COLUMNS:
            if column == 'status':
                statuses = settings.forms.COMPLAINT_STATUSES
                current = draft.get('status')
                options = list(statuses) if current in statuses or not current else [*statuses, current]
                ui.select(options, value=current or None, on_change=bind('status')).props('dense')
            elif column == 'driver_cnic':
                ui.input(value=cell_text(record, column), on_change=bind(column)).props('dense')
            else:
                ui.label(cell_text(record, column))
        with ui.row().classes('gap-1'):
            ui.button(icon='save', on_click=lambda: commit_edit(draft)).props('flat dense')
            ui.button(icon='close', on_click=cancel_edit).props('flat dense')
        if controller.editor.error_message:
            ui.label(controller.editor.error_message).classes('text-negative col-span-full')

    @ui.refreshable
    def roster_view():
        if controller.error_message:
            ui.label(controller.error_message).classes('text-negative')
        with ui.grid(columns=len(COLUMNS) + 1).classes('w-full items-center'):
            sort_header(roster, COLUMNS, on_sort)
            ui.label('')
            for index, record in enumerate(roster.page_items):
                if controller.editor.is_active(index):
                    edit_row(record)
                    continue
                for column, _ in COLUMNS:
                    ui.label(cell_text(record, column))
                with ui.row().classes('gap-1'):
                    ui.button(icon='visibility', on_click=lambda r=record: show_details(r)).props('flat dense')
                    ui.button(icon='edit', on_click=lambda i=index: begin_edit(i)).props('flat dense')
                    ui.button(icon='delete', on_click=lambda r=record: delete(r)).props('flat dense color=negative')
        pager(roster, on_page)

    ui.markdown('## Complaints')
    with ui.row().classes('w-full gap-8 items-start no-wrap'):
        with ui.card().classes('w-96'):
            ui.label('New complaint').classes('text-h6')
            with ui.row().classes('w-full items-center no-wrap'):
                inputs['cnic'] = form_input(form, 'cnic', 'CNIC (XXXXX-XXXXXXX-X)')
                ui.button('Verify', on_click=verify)
            driver_card()
            inputs['driver_name'] = form_input(form, 'driver_name', 'Driver name')
            inputs['phone_no'] = form_input(form, 'phone_no', 'Phone number')
            inputs['ev_id'] = form_input(form, 'ev_id', 'EV ID')
            inputs['maintenance_type'] = ui.select(
                settings.forms.COMPLAINT_TYPES,
                label='Type',
                value=form.value('maintenance_type'),
                on_change=lambda e: form.set_field('maintenance_type', e.value),
            ).classes('w-full')
            inputs['title'] = form_input(form, 'title', 'Title')
            inputs['description'] = form_input(form, 'description', 'Description').props('type=textarea')
            upload = ui.upload(label='Driver image', auto_upload=True, on_upload=on_upload).props('accept=image/*')
            ui.button('Submit', on_click=submit).classes('w-full')

        with ui.column().classes('flex-grow'):
            ui.input('Search', on_change=on_search).props('clearable').classes('w-64')
            roster_view()

    if not await controller.refresh():
        notify_result(False, controller.error_message)
    roster_view.refresh()
