# catalogo/adapters/cli.py
"""
CLI do back-office do catálogo (Typer).

Comandos principais:
- migrate                       -> aplica migrações
- acesso                        -> mostra a decisão de acesso da sessão atual
- produtos listar/mostrar/criar/editar/excluir/importar
- envios listar/mostrar/criar/receber
- rel catalogo/envios           -> relatórios do dashboard
- logs [tipo]                   -> últimas linhas de um log

Os grupos ``produtos``, ``envios`` e ``rel`` exigem acesso à área da squad de vendas
(``--role``/``--squads`` ou CATALOGO_ROLE/CATALOGO_SQUADS).
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
from rich.markup import escape

from catalogo.config import DB_PATH, DEFAULTS, ENV_ROLE, ENV_SQUADS
from catalogo.adapters.parsers import parse_label_raw, parse_lista
from catalogo.adapters.planilha_loader import to_date_iso
from catalogo.domain.access import EstadoSessao, Sessao, decidir_acesso
from catalogo.domain.errors import (
    CatalogoError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from catalogo.domain.models import Envio, Produto
from catalogo.domain.policies import filtro_squad_vendas
from catalogo.infra import logger
from catalogo.infra.logger import LOG_FILES, get_log_summary, log_acesso
from catalogo.infra.migrations import apply_migrations
from catalogo.infra.repositories import EnvioRepo, ProdutoRepo
from catalogo.infra.store import Store
from catalogo.usecases.editar_produto import EditorProduto
from catalogo.usecases.envios import PainelEnvios, criar_envio
from catalogo.usecases.importar_produtos import run_importar_produtos
from catalogo.usecases.listar_produtos import ListaProdutos
from catalogo.usecases.relatorios import resumo_catalogo, resumo_envios


app = typer.Typer(help="Catálogo: back-office")
console = Console()

DB_OPTION = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")


@app.callback()
def cmd_root(
    log: bool = typer.Option(False, "--log", help="Grava logs em catalogo/logs/"),
):
    """Back-office do catálogo: produtos, envios e relatórios."""
    if log:
        logger.ENABLE_LOGGING = True


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _falha(msg: str) -> None:
    console.print(f"[bold red]{escape(msg)}[/]")
    raise typer.Exit(code=1)


def _store(db_path: str) -> Store:
    apply_migrations(db_path)
    return Store(db_path)


def _display_rows(cols: List[str], rows: List[list], title: str, msg: Optional[str] = None) -> None:
    """Exibe colunas/linhas em uma tabela Rich."""
    if not rows:
        console.print(Panel(msg or "Nenhum dado encontrado", title=title, border_style="yellow"))
        return
    table = Table(title=title, box=box.ROUNDED)
    for col in cols:
        if col in ("estoque", "meta mensal", "itens", "unidades", "quantidade"):
            table.add_column(col, justify="right")
        else:
            table.add_column(col)
    for row in rows:
        table.add_row(*["" if v is None else str(v) for v in row])
    console.print(table)
    if msg:
        console.print(f"[dim]{msg}[/dim]")


def _display_produto(p: Produto) -> None:
    table = Table(title=f"Produto {p.name}", box=box.ROUNDED, show_header=False)
    table.add_column("Campo")
    table.add_column("Valor")
    table.add_row("ID", p.id)
    table.add_row("Nome", p.name)
    table.add_row("Nome técnico", p.technical_name)
    table.add_row("Classificação", p.classification)
    table.add_row("Visível", "sim" if p.is_visible else "não")
    table.add_row("Estoque", str(p.stock_quantity))
    table.add_row("Meta mensal", str(p.monthly_production_goal))
    table.add_row("Tipo de produção", p.production_type or "-")
    table.add_row("Tipo de produto", p.product_type or "-")
    if p.variation_data is not None:
        table.add_row("Tamanhos", ", ".join(p.variation_data.sizes) or "-")
    for i, img in enumerate(p.images):
        table.add_row(f"Imagem [{i}]", img)
    for i, label in enumerate(p.labels):
        table.add_row(f"Etiqueta [{i}]", f"{label.key}: {label.value}")
    for i, audio in enumerate(p.audio_slots):
        table.add_row(f"Áudio [{i}]", f"{audio.title} - {audio.author} {audio.url}".strip())
    for campo, valor in (
        ("Benefícios", p.benefits),
        ("História", p.history),
        ("Composição", p.composition),
        ("Segurança", p.safety_requirement),
    ):
        if valor:
            table.add_row(campo, valor)
    console.print(table)


def _display_envio(e: Envio) -> None:
    info = [
        f"ID: {e.id}",
        f"Criado em: {e.created_at}",
        f"Chegada prevista: {e.expected_arrival_date or '-'}",
        f"Status: {'Em Trânsito' if e.pendente else 'Recebido'}",
        f"Itens: {e.quantidade_itens}  Unidades: {e.total_unidades}",
    ]
    if e.description:
        info.append(f"Descrição: {e.description}")
    if e.voucher_url:
        info.append(f"Comprovante: {e.voucher_url}")
    if e.package_url:
        info.append(f"Pacote: {e.package_url}")
    console.print(Panel("\n".join(info), title="Envio"))
    _display_rows(
        ["produto", "quantidade"],
        [[item.nome_produto, item.quantity] for item in e.items],
        title="Produtos",
        msg=None if e.items else "Envio sem itens.",
    )


def _exigir_acesso(role: Optional[str], squads: Optional[str]) -> None:
    sessao = Sessao(role=role, squads=parse_lista(squads, sep=",")) if role else None
    decisao = decidir_acesso(EstadoSessao(session=sessao, loading=False), DEFAULTS.squad_vendas)
    log_acesso(DEFAULTS.squad_vendas, decisao.status, role=role)
    if not decisao.admitido:
        _falha(f"Acesso negado à área {DEFAULTS.squad_vendas} (redirecionar para {decisao.redirecionar_para}).")


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPTION):
    """Aplica as migrações do schema."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path}")


@app.command("acesso")
def cmd_acesso(
    role: Optional[str] = typer.Option(None, "--role", envvar=ENV_ROLE, help="Papel do usuário"),
    squads: Optional[str] = typer.Option(None, "--squads", envvar=ENV_SQUADS, help="Squads, separadas por vírgula"),
):
    """Mostra se a sessão atual é admitida na área da squad de vendas."""
    sessao = Sessao(role=role, squads=parse_lista(squads, sep=",")) if role else None
    decisao = decidir_acesso(EstadoSessao(session=sessao), DEFAULTS.squad_vendas)
    log_acesso(DEFAULTS.squad_vendas, decisao.status, role=role)
    _print_json({
        "area": DEFAULTS.squad_vendas,
        "decisao": decisao.status,
        "redirecionar_para": decisao.redirecionar_para,
    })


@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("transactions", help=f"Um de: {', '.join(LOG_FILES)}"),
    linhas: int = typer.Option(50, help="Número de linhas"),
):
    """Mostra as últimas linhas de um log."""
    typer.echo(get_log_summary(tipo, lines=linhas))


# -----------------------
# produtos
# -----------------------

produtos_app = typer.Typer(help="Gerenciar produtos do catálogo.")
app.add_typer(produtos_app, name="produtos")


@produtos_app.callback()
def cmd_produtos(
    role: Optional[str] = typer.Option(None, "--role", envvar=ENV_ROLE, help="Papel do usuário"),
    squads: Optional[str] = typer.Option(None, "--squads", envvar=ENV_SQUADS, help="Squads, separadas por vírgula"),
):
    _exigir_acesso(role, squads)


def _aplicar_opcoes(editor: EditorProduto, opts: Dict[str, Any]) -> None:
    """Aplica ao rascunho apenas as opções informadas, na ordem do formulário."""
    escalares = {
        "nome": "name",
        "nome_tecnico": "technical_name",
        "classificacao": "classification",
        "visivel": "is_visible",
        "estoque": "stock_quantity",
        "meta": "monthly_production_goal",
        "tipo_producao": "production_type",
        "tipo_produto": "product_type",
        "beneficios": "benefits",
        "historia": "history",
        "composicao": "composition",
        "seguranca": "safety_requirement",
    }
    for opt, campo in escalares.items():
        if opts.get(opt) is not None:
            editor.set_field(campo, opts[opt])

    # remoções primeiro, do maior índice para o menor
    for lista, opt in (("images", "remover_imagem"), ("labels", "remover_etiqueta"), ("audio_slots", "remover_audio")):
        for idx in sorted(opts.get(opt) or [], reverse=True):
            editor.remove_list_item(lista, idx)

    for url in opts.get("imagem") or []:
        vazias = [i for i, img in enumerate(editor.rascunho.images) if not img]
        if vazias:
            editor.set_list_item("images", vazias[0], url)
        else:
            editor.append_list_item("images", url)
    for raw in opts.get("etiqueta") or []:
        label = parse_label_raw(raw)
        if label is None:
            continue
        vazias = [i for i, l in enumerate(editor.rascunho.labels) if not l.key and not l.value]
        patch = {"key": label[0], "value": label[1]}
        if vazias:
            editor.set_list_item("labels", vazias[0], patch)
        else:
            editor.append_list_item("labels", patch)
    for raw in opts.get("audio") or []:
        partes = (raw.split("|") + ["", "", ""])[:3]
        editor.append_list_item("audio_slots", {"title": partes[0].strip(), "author": partes[1].strip(), "url": partes[2].strip()})
    for size in opts.get("tamanho") or []:
        editor.toggle_size(size)


def _submit(editor: EditorProduto) -> Produto:
    try:
        return editor.submit()
    except ValidationError as e:
        _falha(f"Produto inválido: {e}")
    except PersistenceError as e:
        _falha(f"Erro ao salvar produto: {e}")


@produtos_app.command("listar")
def cmd_produtos_listar(
    todos: bool = typer.Option(False, "--todos", help="Sem o recorte da squad de vendas"),
    db_path: str = DB_OPTION,
):
    """Lista os produtos (por padrão, o recorte da squad de vendas)."""
    lista = ListaProdutos(ProdutoRepo(_store(db_path)), notificar=console.print,
                          filtro=None if todos else filtro_squad_vendas)
    try:
        produtos = lista.carregar()
    except PersistenceError as e:
        _falha(f"Erro ao carregar produtos: {e}")
    _display_rows(
        ["id", "nome", "classificação", "estoque", "visível"],
        [[p.id, p.name, p.classification, p.stock_quantity, "sim" if p.is_visible else "não"] for p in produtos],
        title="Produtos",
        msg=None if produtos else "Nenhum produto cadastrado.",
    )


@produtos_app.command("mostrar")
def cmd_produtos_mostrar(
    produto_id: str = typer.Argument(..., help="Id do produto"),
    db_path: str = DB_OPTION,
):
    """Mostra a ficha completa de um produto."""
    try:
        produto = ProdutoRepo(_store(db_path)).get(produto_id)
    except CatalogoError as e:
        _falha(str(e))
    _display_produto(produto)


@produtos_app.command("criar")
def cmd_produtos_criar(
    nome: Optional[str] = typer.Option(None, "--nome"),
    classificacao: Optional[str] = typer.Option(None, "--classificacao"),
    nome_tecnico: Optional[str] = typer.Option(None, "--nome-tecnico"),
    visivel: Optional[bool] = typer.Option(None, "--visivel/--oculto"),
    estoque: Optional[int] = typer.Option(None, "--estoque", min=0),
    meta: Optional[int] = typer.Option(None, "--meta", min=0, help="Meta mensal de produção"),
    tipo_producao: Optional[str] = typer.Option(None, "--tipo-producao", help="hidrolato | oleo_essencial | tintura | outro | none"),
    tipo_produto: Optional[str] = typer.Option(None, "--tipo-produto", help="retail | bulk | none"),
    tamanho: Optional[List[str]] = typer.Option(None, "--tamanho", help=f"Alterna um tamanho ({', '.join(DEFAULTS.tamanhos_disponiveis)})"),
    imagem: Optional[List[str]] = typer.Option(None, "--imagem", help="URL de imagem (repetível)"),
    etiqueta: Optional[List[str]] = typer.Option(None, "--etiqueta", help="'chave: valor' (repetível)"),
    audio: Optional[List[str]] = typer.Option(None, "--audio", help="'título|autor|url' (repetível)"),
    beneficios: Optional[str] = typer.Option(None, "--beneficios"),
    historia: Optional[str] = typer.Option(None, "--historia"),
    composicao: Optional[str] = typer.Option(None, "--composicao"),
    seguranca: Optional[str] = typer.Option(None, "--seguranca"),
    db_path: str = DB_OPTION,
):
    """Cria um produto a partir do modelo em branco."""
    editor = EditorProduto(ProdutoRepo(_store(db_path)))
    try:
        _aplicar_opcoes(editor, dict(locals()))
    except (ValueError, IndexError) as e:
        _falha(str(e))
    produto = _submit(editor)
    typer.echo(f">> Produto criado: {produto.id}")


@produtos_app.command("editar")
def cmd_produtos_editar(
    produto_id: str = typer.Argument(..., help="Id do produto"),
    nome: Optional[str] = typer.Option(None, "--nome"),
    classificacao: Optional[str] = typer.Option(None, "--classificacao"),
    nome_tecnico: Optional[str] = typer.Option(None, "--nome-tecnico"),
    visivel: Optional[bool] = typer.Option(None, "--visivel/--oculto"),
    estoque: Optional[int] = typer.Option(None, "--estoque", min=0),
    meta: Optional[int] = typer.Option(None, "--meta", min=0),
    tipo_producao: Optional[str] = typer.Option(None, "--tipo-producao"),
    tipo_produto: Optional[str] = typer.Option(None, "--tipo-produto", help="retail | bulk | none"),
    tamanho: Optional[List[str]] = typer.Option(None, "--tamanho", help=f"Alterna um tamanho ({', '.join(DEFAULTS.tamanhos_disponiveis)})"),
    imagem: Optional[List[str]] = typer.Option(None, "--imagem"),
    remover_imagem: Optional[List[int]] = typer.Option(None, "--remover-imagem", help="Índice da imagem"),
    etiqueta: Optional[List[str]] = typer.Option(None, "--etiqueta"),
    remover_etiqueta: Optional[List[int]] = typer.Option(None, "--remover-etiqueta", help="Índice da etiqueta"),
    audio: Optional[List[str]] = typer.Option(None, "--audio"),
    remover_audio: Optional[List[int]] = typer.Option(None, "--remover-audio", help="Índice do áudio"),
    beneficios: Optional[str] = typer.Option(None, "--beneficios"),
    historia: Optional[str] = typer.Option(None, "--historia"),
    composicao: Optional[str] = typer.Option(None, "--composicao"),
    seguranca: Optional[str] = typer.Option(None, "--seguranca"),
    db_path: str = DB_OPTION,
):
    """Edita um produto existente (apenas as opções informadas mudam)."""
    repo = ProdutoRepo(_store(db_path))
    try:
        editor = EditorProduto(repo, repo.get(produto_id))
        _aplicar_opcoes(editor, dict(locals()))
    except NotFoundError as e:
        _falha(str(e))
    except (ValueError, IndexError) as e:
        _falha(str(e))
    produto = _submit(editor)
    typer.echo(f">> Produto atualizado: {produto.id}")


@produtos_app.command("excluir")
def cmd_produtos_excluir(
    produto_id: str = typer.Argument(..., help="Id do produto"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Não pedir confirmação"),
    db_path: str = DB_OPTION,
):
    """Exclui um produto após confirmação."""
    falhas: List[str] = []
    lista = ListaProdutos(ProdutoRepo(_store(db_path)), notificar=falhas.append)
    ok = lista.excluir(produto_id, confirmar=lambda msg: yes or typer.confirm(msg))
    if falhas:
        _falha(falhas[0])
    if not ok:
        typer.echo("Operação cancelada.")
        return
    typer.echo(f">> Produto excluído: {produto_id}")


@produtos_app.command("importar")
def cmd_produtos_importar(
    path: str = typer.Argument(..., help="Planilha XLSX ou CSV de produtos"),
    db_path: str = DB_OPTION,
):
    """Importa produtos em lote a partir de uma planilha."""
    _store(db_path)
    info = run_importar_produtos(path, db_path=db_path)
    console.print(Panel(
        f"Total de registros: {info['total']}\nProcessados com sucesso: {info['sucessos']}"
        + (f"\nErros: {len(info['erros'])}" if info["erros"] else ""),
        title=f"{info['tipo']} em Lote",
    ))
    if info["erros"]:
        _display_rows(["linha", "erro"], [[e["linha"], e["mensagem"]] for e in info["erros"]],
                      title="Erros Encontrados")


# -----------------------
# envios
# -----------------------

envios_app = typer.Typer(help="Envios (remessas) de estoque.")
app.add_typer(envios_app, name="envios")


@envios_app.callback()
def cmd_envios(
    role: Optional[str] = typer.Option(None, "--role", envvar=ENV_ROLE, help="Papel do usuário"),
    squads: Optional[str] = typer.Option(None, "--squads", envvar=ENV_SQUADS, help="Squads, separadas por vírgula"),
):
    _exigir_acesso(role, squads)


def _painel(db_path: str, falhas: List[str]) -> PainelEnvios:
    painel = PainelEnvios(EnvioRepo(_store(db_path)), notificar=falhas.append)
    try:
        painel.carregar()
    except PersistenceError as e:
        _falha(f"Erro ao carregar envios: {e}")
    return painel


@envios_app.command("listar")
def cmd_envios_listar(db_path: str = DB_OPTION):
    """Lista os envios, do mais recente para o mais antigo."""
    painel = _painel(db_path, [])
    _display_rows(
        ["id", "chegada prevista", "itens", "unidades", "status"],
        [
            [e.id, e.expected_arrival_date or "", e.quantidade_itens, e.total_unidades,
             "Recebido" if not e.pendente else "Em Trânsito"]
            for e in painel.envios
        ],
        title="Envios",
        msg=None if painel.envios else "Nenhum envio registrado.",
    )


@envios_app.command("mostrar")
def cmd_envios_mostrar(
    envio_id: str = typer.Argument(..., help="Id do envio"),
    db_path: str = DB_OPTION,
):
    """Mostra o detalhe de um envio com seus produtos."""
    painel = _painel(db_path, [])
    try:
        envio = painel.abrir_detalhe(envio_id)
    except NotFoundError as e:
        _falha(str(e))
    _display_envio(envio)


@envios_app.command("criar")
def cmd_envios_criar(
    chegada: str = typer.Option(..., "--chegada", help="Data prevista de chegada (YYYY-MM-DD ou DD/MM/AAAA)"),
    item: List[str] = typer.Option(..., "--item", help="PRODUTO_ID=QUANTIDADE (repetível)"),
    descricao: Optional[str] = typer.Option(None, "--descricao"),
    comprovante: Optional[str] = typer.Option(None, "--comprovante", help="URL da foto do comprovante"),
    pacote: Optional[str] = typer.Option(None, "--pacote", help="URL da foto do pacote"),
    db_path: str = DB_OPTION,
):
    """Registra um novo envio com status pendente."""
    data = to_date_iso(chegada)
    if data is None:
        _falha(f"Data inválida: {chegada}")
    itens: Dict[str, int] = {}
    for raw in item:
        produto_id, _, qtd = raw.partition("=")
        try:
            itens[produto_id.strip()] = itens.get(produto_id.strip(), 0) + int(qtd)
        except ValueError:
            _falha(f"Item inválido: {raw} (use PRODUTO_ID=QUANTIDADE)")
    store = _store(db_path)
    try:
        envio = criar_envio(
            EnvioRepo(store), ProdutoRepo(store), data, itens,
            description=descricao, voucher_url=comprovante, package_url=pacote,
        )
    except ValidationError as e:
        _falha(f"Envio inválido: {e}")
    except PersistenceError as e:
        _falha(f"Erro ao registrar envio: {e}")
    typer.echo(f">> Envio registrado: {envio.id} ({envio.total_unidades} unidades)")


@envios_app.command("receber")
def cmd_envios_receber(
    envio_id: str = typer.Argument(..., help="Id do envio"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Não pedir confirmação"),
    db_path: str = DB_OPTION,
):
    """Marca um envio pendente como recebido."""
    falhas: List[str] = []
    painel = _painel(db_path, falhas)
    try:
        painel.abrir_detalhe(envio_id)
        ok = painel.marcar_recebido(envio_id, confirmar=lambda msg: yes or typer.confirm(msg))
    except CatalogoError as e:
        _falha(str(e))
    if falhas:
        _falha(falhas[0])
    if not ok:
        typer.echo("Operação cancelada.")
        return
    typer.echo(f">> Envio recebido: {envio_id}")


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios do dashboard")
app.add_typer(rel_app, name="rel")


@rel_app.callback()
def cmd_rel(
    role: Optional[str] = typer.Option(None, "--role", envvar=ENV_ROLE, help="Papel do usuário"),
    squads: Optional[str] = typer.Option(None, "--squads", envvar=ENV_SQUADS, help="Squads, separadas por vírgula"),
):
    _exigir_acesso(role, squads)


@rel_app.command("catalogo")
def rel_catalogo(
    todos: bool = typer.Option(False, "--todos", help="Sem o recorte da squad de vendas"),
    limite: int = typer.Option(DEFAULTS.limite_estoque_baixo, help="Limite de estoque baixo"),
    db_path: str = DB_OPTION,
):
    """Estoque total e produtos com estoque baixo."""
    _store(db_path)
    cols, rows, msg = resumo_catalogo(
        db_path=db_path,
        filtro=None if todos else filtro_squad_vendas,
        limite_estoque_baixo=limite,
    )
    _display_rows(cols, rows, title=f"Estoque baixo (< {limite})", msg=msg)


@rel_app.command("envios")
def rel_envios(db_path: str = DB_OPTION):
    """Resumo de itens e unidades por envio."""
    _store(db_path)
    cols, rows, msg = resumo_envios(db_path=db_path)
    _display_rows(cols, rows, title="Envios", msg=msg)


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
