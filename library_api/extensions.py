from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# commit sonrası nesneler expire olmasın (yanıtı commit edilmiş değerlerden üretiyoruz)
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
