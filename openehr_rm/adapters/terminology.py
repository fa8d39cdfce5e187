"""Terminology Adapters.

Implementations of ``TerminologyPort`` used by the validator:

    - ``StaticTerminology``: in-process code tables (ISO 639-1 and ISO 639-2
      languages, common IANA character sets, the openEHR audit change type vocabulary)
    - ``PermissiveTerminology``: accepts every code, for callers that check
      terminology bindings elsewhere

Both are immutable after construction and safe to share between threads.
"""

import logging
from typing import Iterable, Optional

from openehr_rm.domain.ports import TerminologyPort

logger = logging.getLogger(__name__)

LANGUAGE_TERMINOLOGY_IDS = frozenset({"ISO_639-1", "ISO_639-2"})
CHARSET_TERMINOLOGY_IDS = frozenset({"IANA_character-sets"})
AUDIT_CHANGE_TYPE_TERMINOLOGY_IDS = frozenset({"openehr"})

ISO_639_1_CODES = frozenset("""
aa ab ae af ak am an ar as av ay az ba be bg bh bi bm bn bo br bs ca ce ch co cr cs cu cv cy
da de dv dz ee el en eo es et eu fa ff fi fj fo fr fy ga gd gl gn gu gv ha he hi ho hr ht hu
hy hz ia id ie ig ii ik io is it iu ja jv ka kg ki kj kk kl km kn ko kr ks ku kv kw ky la lb
lg li ln lo lt lu lv mg mh mi mk ml mn mr ms mt my na nb nd ne ng nl nn no nr nv ny oc oj om
or os pa pi pl ps pt qu rm rn ro ru rw sa sc sd se sg si sk sl sm sn so sq sr ss st su sv sw
ta te tg th ti tk tl tn to tr ts tt tw ty ug uk ur uz ve vi vo wa wo xh yi yo za zh zu
""".split())

# ISO 639-2 bibliographic and terminologic codes (reserved local range qaa-qtz excluded)
ISO_639_2_CODES = frozenset("""
aar abk ace ach ada ady afa afh afr ain aka akk alb ale alg alt amh ang anp apa ara arc arg arm arn
arp art arw asm ast ath aus ava ave awa aym aze bad bai bak bal bam ban baq bas bat bej bel bem ben
ber bho bih bik bin bis bla bnt bod bos bra bre btk bua bug bul bur byn cad cai car cat cau ceb cel
ces cha chb che chg chi chk chm chn cho chp chr chu chv chy cmc cnr cop cor cos cpe cpf cpp cre crh
crp csb cus cym cze dak dan dar day del den deu dgr din div doi dra dsb dua dum dut dyu dzo efi egy
eka ell elx eng enm epo est eus ewe ewo fan fao fas fat fij fil fin fiu fon fra fre frm fro frr frs
fry ful fur gaa gay gba gem geo ger gez gil gla gle glg glv gmh goh gon gor got grb grc gre grn gsw
guj gwi hai hat hau haw heb her hil him hin hit hmn hmo hrv hsb hun hup hye iba ibo ice ido iii ijo
iku ile ilo ina inc ind ine inh ipk ira iro isl ita jav jbo jpn jpr jrb kaa kab kac kal kam kan kar
kas kat kau kaw kaz kbd kha khi khm kho kik kin kir kmb kok kom kon kor kos kpe krc krl kro kru kua
kum kur kut lad lah lam lao lat lav lez lim lin lit lol loz ltz lua lub lug lui lun luo lus mac mad
mag mah mai mak mal man mao map mar mas may mdf mdr men mga mic min mis mkd mkh mlg mlt mnc mni mno
moh mon mos mri msa mul mun mus mwl mwr mya myn myv nah nai nap nau nav nbl nde ndo nds nep new nia
nic niu nld nno nob nog non nor nqo nso nub nwc nya nym nyn nyo nzi oci oji ori orm osa oss ota oto
paa pag pal pam pan pap pau peo per phi phn pli pol pon por pra pro pus que raj rap rar roa roh rom
ron rum run rup rus sad sag sah sai sal sam san sas sat scn sco sel sem sga sgn shn sid sin sio sit
sla slk slo slv sma sme smi smj smn smo sms sna snd snk sog som son sot spa sqi srd srn srp srr ssa
ssw suk sun sus sux swa swe syc syr tah tai tam tat tel tem ter tet tgk tgl tha tib tig tir tiv tkl
tlh tli tmh tog ton tpi tsi tsn tso tuk tum tup tur tut tvl twi tyv udm uga uig ukr umb und urd uzb
vai ven vie vol vot wak wal war was wel wen wln wol xal xho yao yap yid yor ypk zap zbl zen zgh zha
zho znd zul zun zxx zza
""".split())

IANA_CHARSETS = frozenset({
    "US-ASCII", "UTF-8", "UTF-16", "UTF-16BE", "UTF-16LE", "UTF-32", "UTF-32BE", "UTF-32LE",
    "ISO-8859-1", "ISO-8859-2", "ISO-8859-3", "ISO-8859-4", "ISO-8859-5", "ISO-8859-6",
    "ISO-8859-7", "ISO-8859-8", "ISO-8859-9", "ISO-8859-10", "ISO-8859-13", "ISO-8859-14",
    "ISO-8859-15", "ISO-8859-16", "windows-1250", "windows-1251", "windows-1252",
    "windows-1253", "windows-1254", "windows-1255", "windows-1256", "windows-1257",
    "windows-1258", "KOI8-R", "KOI8-U", "Shift_JIS", "EUC-JP", "ISO-2022-JP", "EUC-KR",
    "GB2312", "GBK", "GB18030", "Big5", "TIS-620",
})

AUDIT_CHANGE_TYPES = {
    "249": "creation",
    "250": "amendment",
    "251": "modification",
    "252": "synthesis",
    "253": "unknown",
    "523": "deleted",
    "666": "attestation",
    "816": "restoration",
    "817": "format conversion",
}


class StaticTerminology(TerminologyPort):
    """Terminology port backed by fixed in-process tables.

    Parameters:
        extra_languages: Additional language codes to accept
        extra_charsets: Additional character set names to accept
    """

    def __init__(self, extra_languages: Optional[Iterable[str]] = None,
                 extra_charsets: Optional[Iterable[str]] = None):
        extra = frozenset(extra_languages or ())
        self.languages = {
            "ISO_639-1": ISO_639_1_CODES | extra,
            "ISO_639-2": ISO_639_2_CODES | extra,
        }
        self._all_languages = ISO_639_1_CODES | ISO_639_2_CODES | extra
        self._charsets = {c.lower() for c in IANA_CHARSETS | frozenset(extra_charsets or ())}

    def is_language_terminology(self, terminology_id: str) -> bool:
        return terminology_id in LANGUAGE_TERMINOLOGY_IDS

    def is_language_code(self, code: str, terminology_id: Optional[str] = None) -> bool:
        # region subtags (en-GB) are accepted on a known primary language
        primary = code.split("-", 1)[0]
        return primary in self.languages.get(terminology_id, self._all_languages)

    def is_charset_terminology(self, terminology_id: str) -> bool:
        return terminology_id in CHARSET_TERMINOLOGY_IDS

    def is_charset(self, code: str) -> bool:
        # IANA names are case-insensitive
        return code.lower() in self._charsets

    def is_audit_change_type(self, terminology_id: str, code: str) -> bool:
        return terminology_id in AUDIT_CHANGE_TYPE_TERMINOLOGY_IDS and code in AUDIT_CHANGE_TYPES


class PermissiveTerminology(TerminologyPort):
    """Terminology port that accepts every terminology id and code."""

    def is_language_terminology(self, terminology_id: str) -> bool:
        return True

    def is_language_code(self, code: str, terminology_id: Optional[str] = None) -> bool:
        return True

    def is_charset_terminology(self, terminology_id: str) -> bool:
        return True

    def is_charset(self, code: str) -> bool:
        return True

    def is_audit_change_type(self, terminology_id: str, code: str) -> bool:
        return True


def audit_change_type_name(code: str) -> str:
    """Return the rubric for an audit change type code, or ``""`` if unknown."""
    return AUDIT_CHANGE_TYPES.get(code, "")


def build_terminology(mode: str) -> TerminologyPort:
    """Build the terminology port for a configured mode (``static`` or ``permissive``).

    Raises:
        ValueError: If the mode is not recognised
    """
    if mode == "static":
        return StaticTerminology()
    if mode == "permissive":
        logger.info("Terminology checks are permissive: all codes are accepted")
        return PermissiveTerminology()
    raise ValueError(f"Unknown terminology mode: {mode}")
