from mercado_pneus.main import ler_palavras


def test_ler_palavras():
    assert ler_palavras("pneu aro 13,  pneu   remold ,") == ["pneu aro 13", "pneu remold"]


def test_ler_palavras_duplicadas_e_vazio():
    assert ler_palavras("pneu, pneu") == ["pneu"]
    assert ler_palavras("") == []
    assert ler_palavras(None) == []
