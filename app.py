# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db lanchonete.db
  python app.py produto import catalogo.csv
  python app.py venda xburger:2 coca:1 --pagamento pix
  python app.py comanda abrir "Mesa 1"
  python app.py lista auto
  python app.py rel estoque --alertas
"""

from lanchonete.adapters.cli import main

if __name__ == "__main__":
    main()
