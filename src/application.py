#!/usr/bin/env python
import os


if __name__ == '__main__':
    os.environ.setdefault('APP_CONFIG_FILE', '../config/dev.cfg')
else:
    os.environ.setdefault('APP_CONFIG_FILE', '../config/prod.cfg')

from main import create_app  # noqa: E402

application = create_app()


if __name__ == '__main__':
    application.run(debug=True)
