from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class LocaleLabels:
    cancelled: str
    feed_description: str
    rights_reserved: str


LABELS: Dict[str, LocaleLabels] = {
    "fr": LocaleLabels(
        cancelled="Annulé",
        feed_description="Actualités de Swiss Tchoukball",
        rights_reserved="tous droits réservés",
    ),
    "de": LocaleLabels(
        cancelled="Abgesagt",
        feed_description="News von Swiss Tchoukball",
        rights_reserved="alle Rechte vorbehalten",
    ),
}


def labels_for(locale: str) -> LocaleLabels:
    try:
        return LABELS[locale]
    except KeyError:
        raise ValueError(f"No labels for locale '{locale}'") from None
