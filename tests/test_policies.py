import pytest

from catalogo.domain.models import Envio, ItemEnvio, Produto
from catalogo.domain.policies import (
    alternar_tamanho,
    filtro_squad_vendas,
    join_por_chave,
    normaliza_production_type,
    remover_item,
    total_unidades,
    variacoes_disponiveis,
)


@pytest.mark.parametrize(
    "index,esperado",
    [
        (0, ["b", "c"]),
        (1, ["a", "c"]),
        (2, ["a", "b"]),
    ],
)
def test_remover_item_remove_so_a_posicao(index, esperado):
    original = ["a", "b", "c"]
    assert remover_item(original, index) == esperado
    assert original == ["a", "b", "c"]


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_remover_item_fora_da_lista(index):
    with pytest.raises(IndexError):
        remover_item(["a", "b", "c"], index)


def test_remover_item_com_valores_repetidos():
    assert remover_item(["x", "x", "x"], 1) == ["x", "x"]


def test_alternar_tamanho_duas_vezes_restaura():
    sizes = ["10ml", "30ml"]
    uma = alternar_tamanho(sizes, "50ml")
    assert uma == ["10ml", "30ml", "50ml"]
    assert alternar_tamanho(uma, "50ml") == sizes

    sem = alternar_tamanho(sizes, "10ml")
    assert sem == ["30ml"]
    assert sorted(alternar_tamanho(sem, "10ml")) == sorted(sizes)


def test_alternar_tamanho_nao_duplica():
    assert alternar_tamanho(["10ml", "10ml"], "30ml") == ["10ml", "30ml"]


@pytest.mark.parametrize(
    "val,esperado",
    [
        (None, None),
        ("", None),
        ("none", None),
        ("None", None),
        ("hidrolato", "hidrolato"),
        (" Tintura ", "tintura"),
        ("oleo_essencial", "oleo_essencial"),
    ],
)
def test_normaliza_production_type(val, esperado):
    assert normaliza_production_type(val) == esperado


def test_normaliza_production_type_invalido():
    with pytest.raises(ValueError):
        normaliza_production_type("sabonete")


@pytest.mark.parametrize(
    "production_type,product_type,esperado",
    [
        (None, None, False),
        (None, "retail", False),
        (None, "bulk", True),
        ("hidrolato", None, True),
        ("tintura", "retail", True),
    ],
)
def test_variacoes_disponiveis(production_type, product_type, esperado):
    p = Produto(id="p", production_type=production_type, product_type=product_type)
    assert variacoes_disponiveis(p) is esperado


@pytest.mark.parametrize(
    "product_type,is_visible,esperado",
    [
        ("retail", True, True),
        ("retail", False, True),
        (None, True, True),
        (None, False, False),
        ("bulk", True, False),
    ],
)
def test_filtro_squad_vendas(product_type, is_visible, esperado):
    p = Produto(id="p", product_type=product_type, is_visible=is_visible)
    assert filtro_squad_vendas(p) is esperado


def test_join_por_chave_associa_itens_na_ordem_de_leitura():
    envios = [Envio(id="s2", created_at="2"), Envio(id="s1", created_at="1")]
    itens = [
        ItemEnvio(id="i1", shipment_id="s1", product_id="a", quantity=3),
        ItemEnvio(id="i2", shipment_id="s2", product_id="b", quantity=1),
        ItemEnvio(id="i3", shipment_id="s1", product_id="c", quantity=5),
        ItemEnvio(id="i4", shipment_id="s-outro", product_id="d", quantity=9),
    ]
    juntos = join_por_chave(itens, envios)

    assert [e.id for e in juntos] == ["s2", "s1"]
    assert [i.id for i in juntos[0].items] == ["i2"]
    assert [i.id for i in juntos[1].items] == ["i1", "i3"]
    assert juntos[1].total_unidades == 8
    # os envios de entrada não são alterados
    assert envios[1].items == []


def test_total_unidades():
    assert total_unidades([]) == 0
    itens = [
        ItemEnvio(id="i1", shipment_id="s", product_id="a", quantity=3),
        ItemEnvio(id="i2", shipment_id="s", product_id="b", quantity=5),
    ]
    assert total_unidades(itens) == 8
