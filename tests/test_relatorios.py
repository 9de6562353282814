from catalogo.domain.policies import filtro_squad_vendas
from catalogo.usecases.envios import criar_envio
from catalogo.usecases.relatorios import resumo_catalogo, resumo_envios


def test_resumo_catalogo_estoque_baixo(db_path, criar_produto):
    criar_produto("Lavanda", stock_quantity=3)
    criar_produto("Alecrim", stock_quantity=50)
    criar_produto("Arnica", stock_quantity=8)
    criar_produto("Copaíba", stock_quantity=10)

    cols, rows, msg = resumo_catalogo(db_path=db_path)

    assert cols[:2] == ["id", "nome"]
    assert [r[1] for r in rows] == ["Lavanda", "Arnica"]
    assert "estoque total: 71" in msg
    assert "2 abaixo de 10" in msg


def test_resumo_catalogo_com_filtro_e_limite(db_path, criar_produto):
    criar_produto("Lavanda 5L", stock_quantity=1, product_type="bulk")
    criar_produto("Alecrim", stock_quantity=20)

    _, rows, msg = resumo_catalogo(db_path=db_path, filtro=filtro_squad_vendas, limite_estoque_baixo=30)

    assert [r[1] for r in rows] == ["Alecrim"]
    assert msg.startswith("1 produto(s)")


def test_resumo_envios_vazio(db_path):
    cols, rows, msg = resumo_envios(db_path=db_path)
    assert "unidades" in cols
    assert rows == []
    assert msg == "Nenhum envio registrado."


def test_resumo_envios(db_path, criar_produto, produto_repo, envio_repo):
    p = criar_produto(stock_quantity=10)
    criar_envio(envio_repo, produto_repo, "2025-03-10", {p.id: 3})
    criar_envio(envio_repo, produto_repo, "2025-03-12", {p.id: 4})

    cols, rows, msg = resumo_envios(db_path=db_path)

    i_chegada = cols.index("chegada prevista")
    i_unidades = cols.index("unidades")
    assert [r[i_chegada] for r in rows] == ["2025-03-12", "2025-03-10"]
    assert [r[i_unidades] for r in rows] == [4, 3]
    assert "2 em trânsito com 7 unidade(s)" in msg
