from .parsing import CallbackAction, build_callback_data


def button(text, action, *params):
    return {'text': text, 'callback_data': build_callback_data(action, *params)}


def inline_keyboard(rows):
    return {'inline_keyboard': [row for row in rows if row]}


def welcome_keyboard():
    return inline_keyboard([
        [button("📂 My files", CallbackAction.FILE, "list", 1)],
    ])


def category_keyboard(categories, per_row=2):
    rows = []
    for start in range(0, len(categories), per_row):
        rows.append([
            button(name.title(), CallbackAction.CATEGORY, name)
            for name in categories[start:start + per_row]
        ])
    rows.append([button("✖️ Cancel", CallbackAction.CATEGORY, "cancel")])
    return inline_keyboard(rows)


def file_list_keyboard(page, page_callback):
    """
    One row of Share/Delete buttons per record on the page, then a
    navigation row. page_callback(n) returns the params for page n.
    """
    rows = []
    for position, record in enumerate(page.items, start=page.offset + 1):
        rows.append([
            button(f"🔗 Share #{position}", CallbackAction.FILE, "share", record.id),
            button(f"🗑 Delete #{position}", CallbackAction.FILE, "delete", record.id),
        ])

    navigation = []
    if page.has_previous:
        navigation.append(button("« Previous", CallbackAction.PAGE, *page_callback(page.number - 1)))
    if page.has_next:
        navigation.append(button("Next »", CallbackAction.PAGE, *page_callback(page.number + 1)))
    rows.append(navigation)

    return inline_keyboard(rows)


def confirm_delete_keyboard(file_id):
    return inline_keyboard([[
        button("✅ Confirm", CallbackAction.CONFIRM, "delete", file_id),
        button("✖️ Cancel", CallbackAction.CONFIRM, "cancel"),
    ]])


def back_to_files_keyboard():
    return inline_keyboard([
        [button("📂 Back to my files", CallbackAction.FILE, "list", 1)],
    ])
