"""Custom shell completion for JD numbers, read from the index."""

import click
from click.shell_completion import CompletionItem

from jdindex.exceptions import JDError


def get_jd_completions(ctx, param, incomplete):
    """
    Complete JD numbers.

    - "" or "1" → areas (10-19), plus matching categories and IDs
    - "11" → category 11, plus all 11.xx IDs
    - "11.0" → matching IDs (11.01, 11.02, ...)
    """
    from jdindex import api
    from jdindex.config import load_config

    try:
        jd = api.get_system(config=load_config())
    except JDError:
        return []

    completions = []

    for area in jd:
        # Only show areas when input is very short (0-1 chars)
        area_str = str(area.number)
        if len(incomplete) <= 1 and area_str.startswith(incomplete):
            completions.append(CompletionItem(area_str, help=area.entry.label))

        for category in area:
            cat_str = str(category.number)
            if cat_str.startswith(incomplete):
                completions.append(CompletionItem(cat_str, help=category.entry.label))

            for jd_id in category:
                id_str = str(jd_id.number)
                if id_str.startswith(incomplete):
                    id_name = jd_id.label or "(home)"
                    completions.append(
                        CompletionItem(id_str, help=f"{category.entry.label} > {id_name}")
                    )

    return completions


class JDNumberType(click.ParamType):
    """Click parameter type with JD number completion."""
    name = "jd_number"

    def shell_complete(self, ctx, param, incomplete):
        return get_jd_completions(ctx, param, incomplete)

    def convert(self, value, param, ctx):
        return value.strip()


JD_NUMBER = JDNumberType()
