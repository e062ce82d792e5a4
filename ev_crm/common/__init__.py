# ev_crm/common/__init__.py
"""
Общие модули: константы, логирование, исключения, очистка текста.
"""
