"""Example: use the service layer directly (no Flask).

Controllers stay thin; the rules live in the services.
"""

import importlib

from config import get_settings_module

from src.school_attendance.school_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, school_name=settings.SCHOOL_NAME)

    for school_class in container.class_service.list_classes():
        print(school_class.grade, school_class.class_name)

    chart = container.report_service.chart_data(days=7)
    print(chart.to_dict()["statusCounts"])


if __name__ == "__main__":
    main()
