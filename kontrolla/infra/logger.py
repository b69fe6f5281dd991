# kontrolla/infra/logger.py
"""
Sistema de logging do checkout.

Este módulo configura e fornece loggers para registrar as operações do
PDV: mutações do carrinho, tentativas de leitura/adição no checkout e
eventos gerais do sistema (carga de catálogo, sessão salva, etc.).
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional


def _env_flag(nome: str) -> bool:
    return os.environ.get(nome, "").strip().lower() in {"1", "true", "sim", "yes", "on"}


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = _env_flag("KONTROLLA_LOGGING")
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = _env_flag("KONTROLLA_OUTPUT")

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem emitida (``delay=True``),
    então importar o módulo não cria arquivos quando o logging está
    desligado.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers de configurações anteriores
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    file_handler.setFormatter(formatter)

    logger.addHandler(file_handler)

    return logger

# Diretório base para logs (na pasta do pacote, ou KONTROLLA_LOGS_DIR)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = Path(os.environ.get("KONTROLLA_LOGS_DIR", str(BASE_DIR / "logs")))

# Loggers específicos para cada operação
carrinho_logger = setup_logger(
    'kontrolla.carrinho',
    str(LOGS_DIR / 'carrinho.log')
)

checkout_logger = setup_logger(
    'kontrolla.checkout',
    str(LOGS_DIR / 'checkout.log')
)

system_logger = setup_logger(
    'kontrolla.system',
    str(LOGS_DIR / 'system.log')
)

def log_carrinho(action: str, produto_id: Any, quantidade: Any = None, **kwargs) -> None:
    """
    Log específico para mutações do carrinho.

    Args:
        action: Ação realizada (adicionar, definir_quantidade, remover...)
        produto_id: Identificador do produto afetado
        quantidade: Quantidade canônica resultante (opcional)
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "action": action,
        "produto_id": produto_id,
        "quantidade": str(quantidade) if quantidade is not None else None,
        **kwargs
    }
    carrinho_logger.info(f"CARRINHO_{action.upper()}: {log_data}")

def log_checkout(evento: str, dados: Dict[str, Any], error: Optional[str] = None) -> None:
    """
    Registra uma tentativa do operador no checkout (leitura, seleção,
    confirmação de quantidade, finalização).

    Args:
        evento: Nome do evento
        dados: Dados da tentativa
        error: Código do erro da taxonomia, quando a tentativa foi rejeitada
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    if error:
        checkout_logger.warning(f"CHECKOUT_REJEITADO: {evento} - {error} - Data: {dados}")
    else:
        checkout_logger.info(f"CHECKOUT_OK: {evento} - Data: {dados}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """
    Log para operações de arquivo (catálogo, sessão).

    Args:
        operation: Tipo de operação (import, save, load)
        file_path: Caminho do arquivo
        rows_processed: Número de linhas processadas
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "operation": operation,
        "file_path": file_path,
        "rows_processed": rows_processed,
        **kwargs
    }
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "checkout", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (carrinho, checkout, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return None

    log_files = {
        "carrinho": LOGS_DIR / "carrinho.log",
        "checkout": LOGS_DIR / "checkout.log",
        "system": LOGS_DIR / "system.log"
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
            recent_lines = all_lines[-lines:] if len(all_lines) > lines else all_lines
            return ''.join(recent_lines)
    except OSError as e:
        return f"Erro ao ler log {log_type}: {str(e)}"
