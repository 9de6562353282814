import pytest

from catalogo.domain.models import novo_produto_em_branco
from catalogo.infra.migrations import apply_migrations
from catalogo.infra.repositories import EnvioRepo, ProdutoRepo
from catalogo.infra.store import Store


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "catalogo_test.sqlite"
    apply_migrations(str(path))
    return str(path)


@pytest.fixture
def store(db_path):
    return Store(db_path)


@pytest.fixture
def produto_repo(store):
    return ProdutoRepo(store)


@pytest.fixture
def envio_repo(store):
    return EnvioRepo(store)


@pytest.fixture
def criar_produto(produto_repo):
    """Grava um produto com os campos informados e devolve a dataclass."""
    def _criar(name="Lavanda", classification="Óleos", **campos):
        produto = novo_produto_em_branco()
        produto.name = name
        produto.classification = classification
        for campo, valor in campos.items():
            setattr(produto, campo, valor)
        produto_repo.insert(produto)
        return produto
    return _criar
