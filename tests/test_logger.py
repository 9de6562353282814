"""
Testes do sistema de logging do catálogo.
"""

from catalogo.infra import logger


def _redireciona(monkeypatch, tmp_path, tipo, atributo):
    path = tmp_path / f"{tipo}.log"
    monkeypatch.setitem(logger.LOG_FILES, tipo, path)
    monkeypatch.setattr(logger, atributo, logger.setup_logger(f"catalogo.test.{tipo}", str(path)))
    return path


def test_logging_desligado_nao_grava(monkeypatch, tmp_path):
    path = _redireciona(monkeypatch, tmp_path, "produtos", "produto_logger")
    monkeypatch.setattr(logger, "ENABLE_LOGGING", False)

    logger.log_produto("create", "p1", name="Lavanda")

    assert not path.exists()
    assert logger.get_log_summary("produtos") == "Log produtos não encontrado."


def test_logging_ligado_grava_e_resume(monkeypatch, tmp_path):
    _redireciona(monkeypatch, tmp_path, "envios", "envio_logger")
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)

    logger.log_envio("create", "s1", itens=2, unidades=8)
    logger.log_envio("receive", "s1")

    resumo = logger.get_log_summary("envios", lines=1)
    assert "ENVIO_RECEIVE" in resumo
    assert "ENVIO_CREATE" not in resumo
    assert "ENVIO_CREATE" in logger.get_log_summary("envios")


def test_tipo_de_log_desconhecido():
    assert logger.get_log_summary("pedidos") == "Log pedidos não encontrado."


def test_diretorio_criado_so_na_primeira_mensagem(tmp_path):
    path = tmp_path / "logs" / "system.log"
    log = logger.setup_logger("catalogo.test.lazy", str(path))
    assert not path.parent.exists()

    log.info("primeira")

    assert path.exists()
    assert "primeira" in path.read_text(encoding="utf-8")
