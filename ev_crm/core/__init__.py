"""
Клиентская логика консоли: списки, формы, нормализация CNIC, файлы.
"""
