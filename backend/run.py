import json
import sys
from dataclasses import asdict, is_dataclass

from src import create_app_store_service
from src.appstore.domain.exceptions import FetchError
from src.appstore.services.app_store_service import describe_error
from src.shared.config import load_settings
from src.shared.logging_config import setup_logging


def main(argv):
    if len(argv) < 2:
        print("用法: python run.py <app|reviews|category|developer|search> <handle|keyword> [page]")
        return 2

    settings = load_settings()
    setup_logging(settings.log_dir)
    service = create_app_store_service(settings)

    kind, target = argv[0], argv[1]
    page = int(argv[2]) if len(argv) > 2 else 1

    operations = {
        'app': lambda: service.get_app_detail(target),
        'reviews': lambda: service.get_app_reviews(target, page),
        'category': lambda: service.get_category(target, page),
        'developer': lambda: service.get_developer(target),
        'search': lambda: service.search(target, page),
    }
    if kind not in operations:
        print(f"未知的页面类型: {kind}")
        return 2

    try:
        result = operations[kind]()
    except FetchError as e:
        message, status = describe_error(e)
        print(json.dumps({'error': message, 'status': status}, ensure_ascii=False))
        return 1

    print(json.dumps(asdict(result) if is_dataclass(result) else result, ensure_ascii=False, indent=2,
                     default=lambda o: getattr(o, 'value', str(o))))
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
