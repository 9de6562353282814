# catalogo/infra/logger.py
"""
Sistema de logging do back-office do catálogo.

Este módulo configura e fornece loggers para registrar as operações que
alteram dados persistidos (produtos e envios), o acesso à camada de
persistência e as decisões de controle de acesso. O log é apenas
diagnóstico: não substitui a notificação ao usuário.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class _LazyFileHandler(logging.FileHandler):
    """FileHandler que só cria o diretório do log ao abrir o arquivo."""

    def _open(self):
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo (e o diretório) só são criados na primeira mensagem, então
    importar o módulo não cria nada em disco.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers existentes (reimportações em testes)
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = _LazyFileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "produtos": LOGS_DIR / "produtos.log",
    "envios": LOGS_DIR / "envios.log",
    "database": LOGS_DIR / "database.log",
    "acesso": LOGS_DIR / "acesso.log",
    "system": LOGS_DIR / "system.log",
}

transaction_logger = setup_logger('catalogo.transactions', str(LOG_FILES["transactions"]))
produto_logger = setup_logger('catalogo.produtos', str(LOG_FILES["produtos"]))
envio_logger = setup_logger('catalogo.envios', str(LOG_FILES["envios"]))
database_logger = setup_logger('catalogo.database', str(LOG_FILES["database"]))
acesso_logger = setup_logger('catalogo.acesso', str(LOG_FILES["acesso"]))
system_logger = setup_logger('catalogo.system', str(LOG_FILES["system"]))


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma operação completa (sucesso ou falha) no log de transações.

    Args:
        operation: Tipo de operação (produto_create, envio_receber, etc.)
        data: Dados da operação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not ENABLE_LOGGING:
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")


def log_produto(action: str, produto_id: str, **kwargs) -> None:
    """
    Log específico para operações de produto.

    Args:
        action: Ação realizada (create, update, delete, import)
        produto_id: Id do produto
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"action": action, "produto_id": produto_id, **kwargs}
    produto_logger.info(f"PRODUTO_{action.upper()}: {log_data}")


def log_envio(action: str, envio_id: Optional[str], **kwargs) -> None:
    """
    Log específico para operações de envio.

    Args:
        action: Ação realizada (create, receive, load)
        envio_id: Id do envio (None antes da criação)
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"action": action, "envio_id": envio_id, **kwargs}
    envio_logger.info(f"ENVIO_{action.upper()}: {log_data}")


def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da coleção
        operation: Operação (INSERT, UPDATE, DELETE, SELECT)
        affected_rows: Número de registros afetados
        **kwargs: Dados adicionais
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")


def log_acesso(area: str, decisao: str, role: Optional[str] = None, **kwargs) -> None:
    """Log de decisões de controle de acesso."""
    if not ENABLE_LOGGING:
        return
    log_data = {"area": area, "decisao": decisao, "role": role, **kwargs}
    acesso_logger.info(f"ACESSO_{decisao.upper()}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not ENABLE_LOGGING:
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def get_log_summary(log_type: str = "transactions", lines: int = 100) -> str:
    """
    Obtém as linhas mais recentes de um log.

    Args:
        log_type: Tipo de log (chave de LOG_FILES)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
    return ''.join(all_lines[-lines:])
