import argparse
import sys
import os
import logging

from sqlalchemy import inspect

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from database import engine, Base, init_db

logger = logging.getLogger(__name__)


def check_tables_exist(bind=None):
    """Получить список существующих таблиц"""
    try:
        return inspect(bind or engine).get_table_names()
    except Exception as e:
        logger.error("Failed to inspect tables: %s", e)
        return []


def create_tables(bind=None):
    """Создать все таблицы моделей"""
    init_db(bind or engine)
    print("Таблицы созданы")
    return True


def drop_tables(bind=None):
    """Удалить все таблицы моделей"""
    import models  # noqa: F401
    try:
        Base.metadata.drop_all(bind=bind or engine)
    except Exception as e:
        print(f"Ошибка при удалении таблиц: {e}")
        return False
    print("Все таблицы успешно удалены")
    return True


def main(argv=None, bind=None):
    parser = argparse.ArgumentParser(description='Управление базой данных')
    parser.add_argument('--create', action='store_true', help='Создать все таблицы')
    parser.add_argument('--drop', action='store_true', help='Удалить все таблицы')
    parser.add_argument('--list', action='store_true', help='Показать существующие таблицы')
    parser.add_argument('--force', action='store_true', help='Не запрашивать подтверждение')

    args = parser.parse_args(argv)

    if args.list:
        tables = check_tables_exist(bind)
        print(f"Найдено таблиц: {len(tables)}")
        for table in tables:
            print(f"  - {table}")

    elif args.create:
        create_tables(bind)

    elif args.drop:
        print("Операция: УДАЛЕНИЕ ВСЕХ ТАБЛИЦ")
        print("=" * 40)

        tables = check_tables_exist(bind)
        if not tables:
            print("Нет таблиц для удаления")
            return 0

        print(f"Найдено таблиц: {len(tables)}")
        for table in tables:
            print(f"  - {table}")

        if not args.force:
            confirm = input("\nВы уверены, что хотите удалить ВСЕ таблицы? (y/N): ")
            if confirm.lower() not in ['y', 'yes']:
                print("Операция отменена")
                return 0

        if not drop_tables(bind):
            return 1

    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
