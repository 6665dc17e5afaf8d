# Inicializador del paquete schemas
