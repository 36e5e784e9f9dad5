from mercado_pneus import marcas
from mercado_pneus.marcas import (
    ECONOMICO,
    NAO_CLASSIFICADO,
    PREMIUM,
    adicionar_marca,
    fuzzy_melhor_marca,
    normalizar_marca,
    palavras_da_marca,
    posicionamento_preco,
    registrar_marca_nova,
)


# ── Normalização ──────────────────────────────────────────────────────────────

def test_normaliza_caixa_e_espacos():
    assert normalizar_marca("  MICHELIN ") == "michelin"
    assert normalizar_marca("General   Tire") == "general tire"


def test_corrige_erro_de_digitacao():
    assert normalizar_marca("Pireli") == "pirelli"
    assert normalizar_marca("bridgeston") == "bridgestone"


def test_vazio():
    assert normalizar_marca("") == ""
    assert normalizar_marca(None) == ""


def test_marca_nova_registrada_uma_vez():
    assert normalizar_marca("Qwzx") == "qwzx"
    assert normalizar_marca("qwzx") == "qwzx"

    linhas = marcas.MARCAS_NOVAS_CSV.read_text(encoding="utf-8-sig").splitlines()
    assert linhas == ["marca_raw", "qwzx"]


def test_marca_nova_sem_registro():
    normalizar_marca("qwzx", registrar=False)
    assert not marcas.MARCAS_NOVAS_CSV.exists()


def test_registrar_marca_nova_caminho(tmp_path):
    destino = tmp_path / "outro" / "novas.csv"
    registrar_marca_nova("Marca X", destino)
    registrar_marca_nova("  ", destino)
    assert destino.read_text(encoding="utf-8-sig").splitlines() == ["marca_raw", "Marca X"]


def test_fuzzy_abaixo_do_limiar():
    assert fuzzy_melhor_marca("qwzx", ["pirelli", "michelin"]) is None
    assert fuzzy_melhor_marca("pirelli", []) is None


# ── Lista e posicionamento ────────────────────────────────────────────────────

def test_posicionamento_preco():
    assert posicionamento_preco("Michelin") == PREMIUM
    assert posicionamento_preco("xbri") == ECONOMICO
    assert posicionamento_preco("qwzx") == NAO_CLASSIFICADO


def test_palavras_da_marca():
    assert palavras_da_marca("pirelli") == ["pneu pirelli", "pirelli pneu", "pneu pirelli preço"]


def test_adicionar_marca():
    lista = ["pirelli"]
    assert adicionar_marca(lista, "Michelin") == ["pirelli", "michelin"]
    assert adicionar_marca(lista, "PIRELLI") == ["pirelli"]
    assert adicionar_marca(lista, "   ") == ["pirelli"]
    assert lista == ["pirelli"]


def test_trecho_curto_ou_longo_nao_vira_outra_marca():
    assert normalizar_marca("good", registrar=False) == "good"
    assert normalizar_marca("sun", registrar=False) == "sun"
    assert normalizar_marca("bf", registrar=False) == "bf"
    assert normalizar_marca("speed", registrar=False) == "speed"
    assert normalizar_marca("linglong crosswind", registrar=False) == "linglong crosswind"
