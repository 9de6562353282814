# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db catalogo.db
  python app.py acesso --role squad5
  python app.py produtos listar
  python app.py produtos importar produtos.xlsx
  python app.py envios criar --chegada 2025-03-10 --item <produto_id>=3
  python app.py rel catalogo
"""

from catalogo.adapters.cli import main

if __name__ == "__main__":
    main()
