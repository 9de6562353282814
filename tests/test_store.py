import pytest

from catalogo.domain.errors import NotFoundError, PersistenceError
from catalogo.infra.store import Store


def test_insert_atribui_id_e_created_at(store):
    rec = store.insert("shipments", {"expected_arrival_date": "2025-03-10", "status": "pending"})
    assert rec["id"]
    assert rec["created_at"]

    rows = store.fetch_all("shipments")
    assert [r["id"] for r in rows] == [rec["id"]]
    assert rows[0]["expected_arrival_date"] == "2025-03-10"


def test_listas_aninhadas_sobrevivem_a_gravacao(store):
    labels = [{"key": "Origem", "value": "Cerrado"}, {"key": "Origem", "value": "Mata"}]
    rec = store.insert("products", {
        "name": "Arnica",
        "classification": "Tinturas",
        "images": ["a.jpg", "b.jpg"],
        "labels": labels,
        "audio_slots": [],
        "is_visible": False,
        "variation_data": {"sizes": ["10ml"]},
    })
    row = store.fetch_all("products", where={"id": rec["id"]})[0]
    assert row["images"] == ["a.jpg", "b.jpg"]
    assert row["labels"] == labels
    assert row["is_visible"] is False
    assert row["variation_data"] == {"sizes": ["10ml"]}


def test_ordenacao(store):
    ids = [store.insert("shipments", {"status": "pending"})["id"] for _ in range(3)]
    asc = store.fetch_all("shipments", order="created_at")
    desc = store.fetch_all("shipments", order=("created_at", "desc"))
    assert [r["id"] for r in asc] == ids
    assert [r["id"] for r in desc] == list(reversed(ids))


def test_update_de_registro_inexistente_falha(store):
    with pytest.raises(PersistenceError):
        store.update("shipments", "nao-existe", {"status": "received"})


def test_update_ignora_id_e_created_at(store):
    rec = store.insert("shipments", {"status": "pending"})
    store.update("shipments", rec["id"], {"id": "x", "created_at": "ontem", "status": "received"})
    row = store.fetch_all("shipments", where={"id": rec["id"]})[0]
    assert row["status"] == "received"
    assert row["created_at"] == rec["created_at"]


def test_delete_devolve_linhas_afetadas(store):
    rec = store.insert("shipments", {"status": "pending"})
    assert store.delete("shipments", rec["id"]) == 1
    assert store.delete("shipments", rec["id"]) == 0


def test_join_com_produto_excluido_vem_none(store):
    prod = store.insert("products", {"name": "Alecrim", "classification": "Óleos"})
    envio = store.insert("shipments", {"status": "pending"})
    store.insert("shipment_items", {"shipment_id": envio["id"], "product_id": prod["id"], "quantity": 2})
    store.delete("products", prod["id"])

    itens = store.fetch_joined("shipment_items", join=["product"])
    assert len(itens) == 1
    assert itens[0]["product"] is None
    assert itens[0]["quantity"] == 2


@pytest.mark.parametrize(
    "chamada",
    [
        lambda s: s.fetch_all("pedidos"),
        lambda s: s.fetch_all("products", where={"preco": 1}),
        lambda s: s.fetch_all("products", order=("name", "lateral")),
        lambda s: s.insert("shipments", {"cor": "azul"}),
        lambda s: s.fetch_joined("shipments", join=["product"]),
    ],
)
def test_colecao_ou_coluna_desconhecida(store, chamada):
    with pytest.raises(ValueError):
        chamada(store)


def test_erro_do_sqlite_vira_persistence_error(tmp_path):
    store = Store(str(tmp_path / "sem_migracao.sqlite"))
    with pytest.raises(PersistenceError):
        store.fetch_all("products")
    with pytest.raises(PersistenceError):
        store.insert("shipments", {"status": "pending"})


def test_quantidade_nao_positiva_e_recusada(store):
    envio = store.insert("shipments", {"status": "pending"})
    with pytest.raises(PersistenceError):
        store.insert("shipment_items", {"shipment_id": envio["id"], "product_id": "p", "quantity": 0})


def test_repo_get_inexistente(produto_repo, envio_repo):
    with pytest.raises(NotFoundError):
        produto_repo.get("nao-existe")
    with pytest.raises(NotFoundError):
        envio_repo.get("nao-existe")
