import re

SPACE_CHARS = frozenset(" \t\r\n")
# unquoted characters that begin syntax we hand back to a real shell
OPERATOR_CHARS = frozenset(";&|<>()")
REDIRECT_CHARS = frozenset("<>")
VAR_NAME_RX = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
ENV_REF_RX = re.compile(r"[A-Za-z0-9_]+")
FD_NUMBER_RX = re.compile(r"[0-9]+")
FIELD_SEPARATOR_RX = re.compile(r"[ \t\r\n]+")
