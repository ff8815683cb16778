import os

from entyre_cms import create_app

app = create_app(os.getenv("FLASK_CONFIG", "development"))
