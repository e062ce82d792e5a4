# ev_crm/__init__.py
"""
Административная консоль парка электро-рикш:
регистрация водителей, проверка CNIC, жалобы на обслуживание.
"""

__version__ = "1.0.0"
