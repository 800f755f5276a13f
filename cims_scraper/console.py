"""
Terminal interaction: banner, warnings and the go/no-go prompt.
"""

from typing import Callable, TextIO
import sys

from .base import Colors

BANNER = r"""
       /\                                                         /\
      /  \      Benvingut, ets a punt d'obtenir les dades de     /  \
     /    \  les muntanyes del repte dels 100 cims de la FEEC!  /    \
    /______\___________________________________________________/______\
"""

QUESTION = "Vols continuar amb l'execució del scraper, sota la teva responsabilitat? (S/N) "


class ConsolePrompt:
    """
    Asks the operator whether the scraper may run.

    Any answer other than 'S' (case-insensitive) declines.
    """

    def __init__(self, ask: Callable[[str], str] = input, out: TextIO = None):
        self.ask = ask
        self.out = out or sys.stdout

    def confirm_proceed(self) -> bool:
        try:
            answer = self.ask(QUESTION)
        except EOFError:
            answer = ''
        if answer.strip().upper() != 'S':
            print(Colors.red(
                "Has decidit aturar l'execució. Si la vols tornar a executar, torna a executar!"
            ), file=self.out)
            return False
        return True


def print_banner(out: TextIO = None):
    """Print the welcome banner and the responsible-use warnings."""
    out = out or sys.stdout
    print(Colors.green(BANNER), file=out)
    print(Colors.red(
        "Si us plau, fes servir aquesta eina amb responsabilitat! Ja que pot saturar la web de la FEEC!\n"
    ), file=out)
    print(Colors.yellow(
        "El creador d'aquesta eina no es fa responsable de l'ús que se'n pugui fer!\n"
    ), file=out)
