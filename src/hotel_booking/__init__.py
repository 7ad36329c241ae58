"""
Демонстрационная система управления отелем.

Номера, клиенты и бронирования хранятся в памяти процесса,
управление идет через консольное меню.
"""

__version__ = "0.1.0"
