# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py catalogo produtos.csv
  python app.py buscar queijo produtos.csv
  python app.py venda --catalogo produtos.csv --sessao venda.json
  python app.py carrinho show --sessao venda.json
  python app.py carrinho handoff --sessao venda.json
"""

from kontrolla.adapters.cli import main

if __name__ == "__main__":
    main()
