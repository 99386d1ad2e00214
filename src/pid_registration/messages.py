"""User-facing notice texts."""

NAME_TOO_SHORT = "Nome deve ter pelo menos 3 caracteres"
PHONE_INVALID = "Formato inválido. Use (99) 99999-9999"

REGISTRATION_SUCCESS = "Inscrição realizada com sucesso!"
REGISTRATION_FAILURE = "Erro ao realizar inscrição: {detail}"
UNKNOWN_ERROR = "Erro desconhecido"

LOGIN_SUCCESS = "Login realizado com sucesso!"
LOGIN_FAILURE = "Erro ao fazer login. Verifique suas credenciais ou permissões."
LOGOUT_SUCCESS = "Logout realizado com sucesso!"
LOGOUT_FAILURE = "Erro ao fazer logout"
SESSION_EXPIRED = "Sua sessão expirou. Por favor, faça login novamente."

REFRESH_SUCCESS = "Dados atualizados com sucesso!"
REFRESH_FAILURE = "Erro ao carregar inscrições"
UPDATE_SUCCESS = "Inscrição atualizada com sucesso!"
UPDATE_FAILURE = "Erro ao atualizar inscrição"
DELETE_SUCCESS = "Inscrição excluída com sucesso!"
DELETE_FAILURE = "Erro ao excluir inscrição"
DELETE_CONFIRM = "Tem certeza que deseja excluir esta inscrição?"
DELETE_NOT_CONFIRMED = "Confirme a exclusão antes de continuar."
COPY_SUCCESS = "Copiado para a área de transferência!"
COPY_FAILURE = "Erro ao copiar"

LOADING_PLACEHOLDER = "Carregando..."
EMPTY_PLACEHOLDER = "Nenhuma inscrição encontrada"


def registration_failure(detail: str | None) -> str:
    """Return the failure notice carrying the backend message."""
    return REGISTRATION_FAILURE.format(detail=detail or UNKNOWN_ERROR)
