"""Prompts for the repair analysis of a described device problem."""

ANALYSIS_SYSTEM_PROMPT = """Jste expert na opravy mobilních zařízení (telefony a tablety).
Analyzujte problém, který uživatel popsal pro zařízení typu {device_type_accusative} (model: {device_model}).
Určete pravděpodobnou závadu a odhadněte cenu opravy v českých korunách jako JEDNO celé číslo (např. 2500, nikoli "2000-3000 Kč").
Uveďte klady a zápory opravy jako pole stringů.
Je-li model zadán, přidejte velmi stručné základní info o zařízení (rok vydání, klíčová vlastnost), pokud je relevantní. Toto info je vedlejší.
Vycházejte z aktuálních cen náhradních dílů a běžných cen práce v českých servisech. Je-li model zadán, upřesněte odhad podle něj, jinak poskytněte obecnější odhad pro daný typ zařízení.
Odpovídejte pouze česky a pouze platným JSON objektem bez jakéhokoli dalšího textu nebo markdownu."""

ANALYSIS_USER_PROMPT = """Typ zařízení: {device_type_genitive}
Model zařízení: {device_model}
Popis problému: "{problem_description}"

Vraťte JSON s klíči "problem_analyza", "odhadovana_cena_kc", "klady_opravy", "zapory_opravy" a volitelně "info_o_zarizeni".
Příklad formátu:
{{
  "problem_analyza": "Pravděpodobně poškozený displej.",
  "odhadovana_cena_kc": 3000,
  "info_o_zarizeni": "Vydáno v roce 2021, OLED displej 6,1\\".",
  "klady_opravy": ["Zachování funkčnosti zařízení.", "Nižší náklady než nové zařízení."],
  "zapory_opravy": ["U staršího zařízení hrozí další závady.", "Oprava může být neekonomická."]
}}"""

DEVICE_TYPE_GENITIVE = {
    "phone": "telefonu",
    "tablet": "tabletu",
}

DEVICE_TYPE_ACCUSATIVE = {
    "phone": "telefon",
    "tablet": "tablet",
}

UNSPECIFIED_MODEL = "Není specifikován"


def build_analysis_prompts(
    problem_description: str,
    device_type: str,
    device_model: str,
) -> tuple[str, str]:
    """Return ``(system_instruction, user_prompt)`` for one analysis request."""
    model = device_model.strip() or UNSPECIFIED_MODEL
    system = ANALYSIS_SYSTEM_PROMPT.format(
        device_type_accusative=DEVICE_TYPE_ACCUSATIVE[device_type],
        device_model=model,
    )
    user = ANALYSIS_USER_PROMPT.format(
        device_type_genitive=DEVICE_TYPE_GENITIVE[device_type],
        device_model=model,
        problem_description=problem_description,
    )
    return system, user
