from sqlalchemy import inspect

from gymtrials.db.session import engine
from gymtrials.db.base import Base

# Verificar qué tablas existen ya
inspector = inspect(engine)
existing_tables = inspector.get_table_names()

# Crear las tablas en el orden correcto respetando las dependencias
for table in Base.metadata.sorted_tables:
    if table.name not in existing_tables:
        print(f"Creando tabla {table.name}...")
        table.create(engine, checkfirst=True)

print('Proceso de creación de tablas completado')
