import json

import pytest
from typer.testing import CliRunner

from catalogo.adapters.cli import app
from catalogo.domain.models import STATUS_RECEBIDO, Label
from catalogo.usecases.envios import criar_envio

runner = CliRunner()

ADMIN = {"CATALOGO_ROLE": "superadmin"}


@pytest.fixture(autouse=True)
def _sem_sessao(monkeypatch):
    monkeypatch.delenv("CATALOGO_ROLE", raising=False)
    monkeypatch.delenv("CATALOGO_SQUADS", raising=False)


def test_cli_migrate(tmp_path):
    db_path = tmp_path / "catalogo_test.sqlite"
    result = runner.invoke(app, ["migrate", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert db_path.exists()


@pytest.mark.parametrize(
    "env,decisao,destino",
    [
        ({}, "negado", "/login"),
        ({"CATALOGO_ROLE": "squad3"}, "negado", "/"),
        ({"CATALOGO_ROLE": "squad3", "CATALOGO_SQUADS": "squad2,squad5"}, "admitido", None),
        ({"CATALOGO_ROLE": "otter"}, "admitido", None),
    ],
)
def test_cli_acesso(env, decisao, destino):
    result = runner.invoke(app, ["acesso"], env=env)
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["area"] == "squad5"
    assert data["decisao"] == decisao
    assert data["redirecionar_para"] == destino


def test_cli_produtos_exige_acesso(db_path):
    result = runner.invoke(app, ["produtos", "listar", "--db", db_path], env={"CATALOGO_ROLE": "public"})
    assert result.exit_code == 1
    assert "Acesso negado" in result.output

    result = runner.invoke(app, ["envios", "listar", "--db", db_path])
    assert result.exit_code == 1


def test_cli_role_por_opcao(db_path):
    result = runner.invoke(app, ["produtos", "--role", "squad5", "listar", "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "Nenhum produto cadastrado." in result.output


def test_cli_criar_e_editar_produto(db_path, produto_repo):
    result = runner.invoke(
        app,
        [
            "produtos", "criar", "--db", db_path,
            "--nome", "Lavanda",
            "--classificacao", "Óleos",
            "--imagem", "a.jpg",
            "--imagem", "b.jpg",
            "--etiqueta", "Grau: 1º Grau",
            "--estoque", "12",
        ],
        env=ADMIN,
    )
    assert result.exit_code == 0, result.output
    [produto] = produto_repo.get_all()
    assert produto.name == "Lavanda"
    assert produto.images == ["a.jpg", "b.jpg"]
    assert produto.labels == [Label("Grau", "1º Grau")]
    assert produto.stock_quantity == 12
    assert produto.id in result.output

    result = runner.invoke(
        app,
        [
            "produtos", "editar", produto.id, "--db", db_path,
            "--remover-imagem", "0",
            "--tamanho", "10ml",
            "--oculto",
        ],
        env=ADMIN,
    )
    assert result.exit_code == 0, result.output
    editado = produto_repo.get(produto.id)
    assert editado.images == ["b.jpg"]
    assert editado.product_type == "bulk"
    assert editado.variation_data.sizes == ["10ml"]
    assert editado.is_visible is False
    assert editado.name == "Lavanda"


def test_cli_criar_sem_obrigatorios(db_path, produto_repo):
    result = runner.invoke(app, ["produtos", "criar", "--db", db_path, "--nome", "Lavanda"], env=ADMIN)
    assert result.exit_code == 1
    assert "classification" in result.output
    assert produto_repo.get_all() == []


def test_cli_listar_aplica_recorte(db_path, criar_produto):
    criar_produto("Alecrim")
    criar_produto("Granel", product_type="bulk")

    result = runner.invoke(app, ["produtos", "listar", "--db", db_path], env=ADMIN)
    assert result.exit_code == 0, result.output
    assert "Alecrim" in result.output
    assert "Granel" not in result.output

    result = runner.invoke(app, ["produtos", "listar", "--todos", "--db", db_path], env=ADMIN)
    assert "Granel" in result.output


def test_cli_excluir_produto(db_path, criar_produto, produto_repo):
    p = criar_produto()

    result = runner.invoke(app, ["produtos", "excluir", p.id, "--db", db_path], env=ADMIN, input="n\n")
    assert result.exit_code == 0, result.output
    assert "Operação cancelada." in result.output
    assert len(produto_repo.get_all()) == 1

    result = runner.invoke(app, ["produtos", "excluir", p.id, "--yes", "--db", db_path], env=ADMIN)
    assert result.exit_code == 0, result.output
    assert produto_repo.get_all() == []


def test_cli_criar_e_receber_envio(db_path, criar_produto, envio_repo):
    p = criar_produto(stock_quantity=10)

    result = runner.invoke(
        app,
        ["envios", "criar", "--db", db_path, "--chegada", "10/03/2025", "--item", f"{p.id}=3"],
        env=ADMIN,
    )
    assert result.exit_code == 0, result.output
    [envio] = envio_repo.get_all()
    assert envio.expected_arrival_date == "2025-03-10"
    assert envio.total_unidades == 3

    result = runner.invoke(app, ["envios", "receber", envio.id, "--yes", "--db", db_path], env=ADMIN)
    assert result.exit_code == 0, result.output
    assert envio_repo.get(envio.id).status == STATUS_RECEBIDO

    result = runner.invoke(app, ["envios", "receber", envio.id, "--yes", "--db", db_path], env=ADMIN)
    assert result.exit_code == 1


def test_cli_envio_acima_do_estoque(db_path, criar_produto, envio_repo):
    p = criar_produto(stock_quantity=2)
    result = runner.invoke(
        app,
        ["envios", "criar", "--db", db_path, "--chegada", "2025-03-10", "--item", f"{p.id}=3"],
        env=ADMIN,
    )
    assert result.exit_code == 1
    assert envio_repo.get_all() == []


def test_cli_mostrar_envio_com_produto_removido(db_path, criar_produto, produto_repo, envio_repo):
    a = criar_produto("Lavanda", stock_quantity=10)
    b = criar_produto("Alecrim", stock_quantity=10)
    envio = criar_envio(envio_repo, produto_repo, "2025-03-10", {a.id: 3, b.id: 5})
    produto_repo.delete(b.id)

    result = runner.invoke(app, ["envios", "mostrar", envio.id, "--db", db_path], env=ADMIN)
    assert result.exit_code == 0, result.output
    assert "Lavanda" in result.output
    assert "Produto Removido" in result.output
    assert "Unidades: 8" in result.output


def test_cli_rel_envios_vazio(db_path):
    result = runner.invoke(app, ["rel", "envios", "--db", db_path], env=ADMIN)
    assert result.exit_code == 0, result.output
    assert "Nenhum envio registrado." in result.output


def test_cli_rel_exige_acesso(db_path, criar_produto):
    criar_produto("Secreto", stock_quantity=1)

    result = runner.invoke(app, ["rel", "catalogo", "--db", db_path])
    assert result.exit_code == 1
    assert "Acesso negado" in result.output
    assert "Secreto" not in result.output

    result = runner.invoke(app, ["rel", "envios", "--db", db_path], env={"CATALOGO_ROLE": "squad3"})
    assert result.exit_code == 1

    result = runner.invoke(app, ["rel", "catalogo", "--db", db_path], env={"CATALOGO_ROLE": "squad5"})
    assert result.exit_code == 0, result.output
    assert "Secreto" in result.output


def test_cli_tipo_produto_varejo(db_path, produto_repo):
    result = runner.invoke(
        app,
        [
            "produtos", "criar", "--db", db_path,
            "--nome", "Sabonete",
            "--classificacao", "Varejo",
            "--tipo-produto", "retail",
            "--oculto",
        ],
        env=ADMIN,
    )
    assert result.exit_code == 0, result.output
    [produto] = produto_repo.get_all()
    assert produto.product_type == "retail"

    # varejo entra no recorte mesmo oculto
    result = runner.invoke(app, ["produtos", "listar", "--db", db_path], env=ADMIN)
    assert "Sabonete" in result.output


@pytest.mark.parametrize(
    "opcao,valor",
    [
        ("--tipo-produto", "atacado"),
        ("--tamanho", "3 Litros"),
    ],
)
def test_cli_criar_com_valor_invalido(db_path, produto_repo, opcao, valor):
    result = runner.invoke(
        app,
        ["produtos", "criar", "--db", db_path, "--nome", "Lavanda", "--classificacao", "Óleos", opcao, valor],
        env=ADMIN,
    )
    assert result.exit_code == 1
    assert produto_repo.get_all() == []
