"""
Unit tests for class enumeration.

Contract:
- strategies run in order; the first non-empty result wins and is never
  merged with later strategies
- titles are deduplicated, first occurrence kept in place
- no strategy hit -> (None, [])
"""

import unittest

from bs4 import BeautifulSoup

from sigaa_scraper.models import ClassListing, ScheduleSlot
from sigaa_scraper.strategies import (
    course_code_anchors,
    dedupe_by_title,
    enumerate_classes,
    parse_course_code,
)

PORTAL_HOME = """
<html><body>
<table>
  <tr><th>Componente</th><th>Local</th><th>Horário</th></tr>
  <tr>
    <td class="descricao"><form><a href="#" onclick="jsfcljs()">CK0245 - PROGRAMAÇÃO PARA DISPOSITIVOS MÓVEIS</a></form></td>
    <td class="info"><center>Bloco 952, Sala 01</center></td>
    <td class="info"><center>24M12</center></td>
  </tr>
  <tr>
    <td class="descricao"><form><a href="#">INTELIGÊNCIA ARTIFICIAL</a></form></td>
    <td class="info">Bloco 952, Sala 05</td>
    <td class="info">5M34</td>
  </tr>
  <tr>
    <td class="descricao"><a href="#">CK0245 - PROGRAMAÇÃO PARA DISPOSITIVOS MÓVEIS</a></td>
    <td class="info">Bloco 1, Sala 9</td>
  </tr>
</table>
<a href="#">CK0999 - OUTRA DISCIPLINA</a>
</body></html>
"""

TURMA_LINKS = """
<html><body><table>
  <tr><td><a href="/sigaa/ava/turma.jsf?id=1">REDES DE COMPUTADORES</a></td><td>Sala 2</td></tr>
  <tr><td><a href="/sigaa/ava/turma.jsf?id=2">COMPILADORES</a></td><td>Sala 3</td></tr>
</table></body></html>
"""

CODE_ANCHORS = """
<html><body><div>
  <a href="#">RUS0081 - MATEMATICA COMPUTACIONAL</a>
  <a href="#">Sair</a>
  <a href="#">RUS0090 – ALGORITMOS</a>
</div></body></html>
"""

GENERIC_TABLE = """
<html><body><table>
  <tr><th>Código</th><th>Nome</th></tr>
  <tr><td>CK0101</td><td>CÁLCULO I</td></tr>
  <tr><td>CK0102</td><td><a href="#">FÍSICA I</a></td></tr>
  <tr><td>linha solta</td></tr>
</table></body></html>
"""

PLAIN_TEXT = """
<html><body>
  <p>Matriculado em CK0301 ESTRUTURAS DE DADOS</p>
  <p>Outro parágrafo</p>
</body></html>
"""


class TestEnumerateClasses(unittest.TestCase):
    def test_structured_rows_win_and_carry_details(self) -> None:
        strategy, listings = enumerate_classes(PORTAL_HOME)

        self.assertEqual(strategy, "structured_rows")
        self.assertEqual(
            [c.title for c in listings],
            ["CK0245 - PROGRAMAÇÃO PARA DISPOSITIVOS MÓVEIS", "INTELIGÊNCIA ARTIFICIAL"],
        )
        first, second = listings
        self.assertEqual(first.code, "CK0245")
        self.assertEqual(first.location, "Bloco 952, Sala 01")
        self.assertEqual(
            first.schedule,
            [
                ScheduleSlot(weekday=2, start="08:00", end="10:00"),
                ScheduleSlot(weekday=4, start="08:00", end="10:00"),
            ],
        )
        self.assertIsNone(second.code)
        self.assertEqual(second.schedule, [ScheduleSlot(weekday=5, start="10:00", end="12:00")])

    def test_later_strategies_are_not_merged(self) -> None:
        # CK0999 would be found by course_code_anchors, but structured_rows won
        _, listings = enumerate_classes(PORTAL_HOME)
        self.assertNotIn("CK0999 - OUTRA DISCIPLINA", [c.title for c in listings])

    def test_turma_links(self) -> None:
        strategy, listings = enumerate_classes(TURMA_LINKS)
        self.assertEqual(strategy, "detail_links")
        self.assertEqual([c.title for c in listings], ["REDES DE COMPUTADORES", "COMPILADORES"])

    def test_course_code_anchors(self) -> None:
        strategy, listings = enumerate_classes(CODE_ANCHORS)
        self.assertEqual(strategy, "course_code_anchors")
        self.assertEqual([c.code for c in listings], ["RUS0081", "RUS0090"])

    def test_generic_table_rows(self) -> None:
        strategy, listings = enumerate_classes(GENERIC_TABLE)
        self.assertEqual(strategy, "generic_table_rows")
        self.assertEqual(
            [(c.code, c.title) for c in listings],
            [("CK0101", "CÁLCULO I"), ("CK0102", "FÍSICA I")],
        )

    def test_page_text_fallback(self) -> None:
        strategy, listings = enumerate_classes(PLAIN_TEXT)
        self.assertEqual(strategy, "page_text_patterns")
        self.assertEqual(len(listings), 1)
        self.assertEqual(listings[0].code, "CK0301")

    def test_nothing_found(self) -> None:
        self.assertEqual(enumerate_classes("<html><body><p>Sem turmas</p></body></html>"), (None, []))

    def test_first_successful_strategy_only(self) -> None:
        calls = []

        def empty(soup):
            calls.append("empty")
            return None

        def first(soup):
            calls.append("first")
            return [ClassListing(title="A")]

        def second(soup):
            calls.append("second")
            return [ClassListing(title="B")]

        strategy, listings = enumerate_classes("<html></html>", (empty, first, second))

        self.assertEqual(strategy, "first")
        self.assertEqual([c.title for c in listings], ["A"])
        self.assertEqual(calls, ["empty", "first"])


class TestHelpers(unittest.TestCase):
    def test_dedupe_keeps_first_seen_order(self) -> None:
        listings = [
            ClassListing(title="B", code="1"),
            ClassListing(title="A"),
            ClassListing(title="B", code="2"),
        ]
        unique = dedupe_by_title(listings)
        self.assertEqual([(c.title, c.code) for c in unique], [("B", "1"), ("A", None)])

    def test_titles_unique_after_enumeration(self) -> None:
        for html in (PORTAL_HOME, TURMA_LINKS, CODE_ANCHORS, GENERIC_TABLE, PLAIN_TEXT):
            _, listings = enumerate_classes(html)
            titles = [c.title for c in listings]
            self.assertEqual(len(titles), len(set(titles)))

    def test_parse_course_code(self) -> None:
        self.assertEqual(parse_course_code("CK0245 - PROGRAMAÇÃO"), "CK0245")
        self.assertIsNone(parse_course_code("INTELIGÊNCIA ARTIFICIAL"))

    def test_course_code_anchors_ignores_plain_links(self) -> None:
        soup = BeautifulSoup('<a href="#">Sair</a>', "html.parser")
        self.assertIsNone(course_code_anchors(soup))


if __name__ == "__main__":
    unittest.main()
