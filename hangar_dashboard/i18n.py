"""Translation tables and lookup helpers.

Only the keys used by the dashboard screens are carried.  Keys are dotted
(``section.name``); placeholders use ``{name}`` and are filled with plain
string replacement so stray braces in values are harmless.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from hangar_dashboard.constants import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES
from hangar_dashboard.errors import ApiError

logger = logging.getLogger(__name__)

_EN: Dict[str, Dict[str, str]] = {
    "common": {
        "loading": "Loading...",
        "error": "An error occurred.",
        "owner": "Owner",
        "source_url": "Source URL",
        "deployed_image": "Deployed Image",
        "status": "Status",
        "created_on": "Created on: {date}",
        "back_to_home": "Back to home",
        "cancel": "Cancel",
        "confirm": "Confirm",
        "status_running": "Running",
        "status_exited": "Exited",
        "status_stopped": "Stopped",
        "status_dead": "Dead",
        "status_restarting": "Restarting",
        "status_created": "Created",
        "status_paused": "Paused",
        "status_unknown": "Unknown",
    },
    "home": {
        "title": "Welcome to Hangar",
        "description": "Easily deploy and manage your applications.",
        "project_id_label": "Project ID",
        "open_project_button": "Open project",
        "my_database_button": "My database",
        "invalid_project_id": "Please enter a numeric project ID.",
        "create_project_button": "New project",
    },
    "create_project": {
        "title": "Create a new project",
        "github_tab": "From GitHub",
        "direct_tab": "From a Docker image",
        "database_tab": "Database only",
        "description_github": (
            "Deploy straight from a GitHub repository. Hangar builds the image "
            "from your Dockerfile."
        ),
        "description_direct": "Deploy a public Docker image that is already built.",
        "description_database": "Create a personal MySQL database without deploying a project.",
        "name_label": "Project name",
        "name_placeholder": "my-awesome-app",
        "name_help": "Letters, numbers and hyphens only. It becomes your app's subdomain.",
        "github_repo_url_label": "GitHub repository URL",
        "github_repo_url_placeholder": "https://github.com/user/repo",
        "github_branch_label": "Branch (optional)",
        "github_branch_help": "Defaults to the repository's default branch.",
        "github_root_dir_label": "Root directory (optional)",
        "github_root_dir_help": "Folder that contains the Dockerfile, for monorepos.",
        "image_label": "Docker image URL",
        "image_placeholder": "ghcr.io/user/app:latest",
        "volume_path_label": "Persistent volume path (optional)",
        "volume_path_help": "Directory inside the container kept across redeployments.",
        "participants_label": "Participants (optional)",
        "participants_placeholder": "login1, login2",
        "participants_help": "Comma-separated logins of users who may manage the project.",
        "env_vars_label": "Environment variables (optional)",
        "env_vars_help": "One KEY=VALUE per line.",
        "create_db_checkbox": "Also create and link a database",
        "missing_fields": "Please fill in every required field.",
        "submit_button": "Deploy",
        "submit_button_loading": "Deploying...",
        "link_github_prompt": "Install the Hangar GitHub App to continue.",
        "link_github_button": "Configure the GitHub App",
    },
    "project_dashboard": {
        "title": "Project dashboard",
        "visit_app_button": "Visit App",
        "card_title_info": "Project info",
        "card_title_controls": "Controls",
        "card_title_logs": "Logs",
        "card_title_metrics": "Metrics (in %)",
        "card_title_danger": "Danger zone",
        "card_title_update_image": "Update image",
        "card_title_rebuild": "Rebuild from GitHub",
        "card_title_env_vars": "Manage Environment Variables",
        "logs_placeholder": "Click 'Fetch logs' to display container logs",
        "logs_empty": (
            "No log output. The container might not be logging to stdout/stderr, "
            "or it's just quiet."
        ),
        "logs_error": "Error fetching logs: {error}",
        "delete_button": "Delete project",
        "confirm_delete": (
            "Are you sure you want to permanently delete the project '{name}'? "
            "This action is irreversible."
        ),
        "confirm_delete_db_warning": "The linked database will also be permanently deleted.",
        "access_error_title": "Access error",
        "load_error_message": "Could not load project: {error}",
        "start_button": "Start",
        "stop_button": "Stop",
        "restart_button": "Restart",
        "start_success": "Project started successfully!",
        "stop_success": "Project stopped successfully!",
        "restart_success": "Project restarted successfully!",
        "fetch_logs_button": "Fetch logs",
        "fetch_logs_loading": "Loading...",
        "update_image_description": (
            "Deploy a new version of your application by providing a new Docker image URL."
        ),
        "confirm_update_image": (
            "Are you sure? Updating the image for '{name}' will take a few moments."
        ),
        "update_image_button": "Update image",
        "update_image_button_loading": "Updating...",
        "rebuild_description": (
            "Rebuild your project from the latest GitHub repository code. "
            "This will pull the latest changes and redeploy your application."
        ),
        "confirm_rebuild": (
            "Are you sure you want to rebuild the project '{name}'? "
            "This may take a few moments."
        ),
        "rebuild_button": "Rebuild from GitHub",
        "rebuild_button_loading": "Rebuilding...",
        "participants_list_label": "Participants:",
        "manage_participants_title": "Manage participants",
        "no_participants": "This project has no participants.",
        "remove_participant_button": "Remove",
        "confirm_remove_participant": "Are you sure you want to remove {name} from the project?",
        "add_participant_label": "Add a participant (login)",
        "add_participant_placeholder": "situ62394",
        "add_participant_button": "Add",
        "add_participant_button_loading": "Adding...",
        "env_vars_description": (
            "Changes will trigger a project restart to take effect. "
            "Values are encrypted at rest."
        ),
        "env_vars_updated_success": (
            "Environment variables updated successfully. The project is restarting."
        ),
        "save_and_restart_button": "Save & Restart",
        "save_and_restart_button_loading": "Saving...",
        "persistent_volume_label": "Persistent Volume",
        "github_branch_label": "GitHub branch",
        "github_root_dir_label": "Root directory",
    },
    "database": {
        "title": "Database",
        "dashboard_title": "Database Dashboard",
        "connection_info_title": "Connection Information",
        "host": "Host",
        "port": "Port",
        "db_name": "Database Name",
        "username": "Username",
        "password": "Password",
        "open_phpmyadmin": "Open phpMyAdmin",
        "link_to_project_title": "Link to a Project",
        "no_projects_to_link": "You have no projects available to link this database to.",
        "select_project": "Select a project...",
        "link_button": "Link to Project",
        "unlink_button": "Unlink from Project",
        "delete_button": "Delete Database",
        "confirm_delete": (
            "Are you sure you want to permanently delete this database? "
            "This action is irreversible."
        ),
        "no_db_linked": "No database is linked to this project.",
        "unlinked_db_found": "You have an existing unlinked database ('{name}').",
        "link_this_db_button": "Link this database",
        "create_and_link_button": "Create & Link a New Database",
        "create_button": "Create my database",
        "load_error": "Error loading database: {error}",
    },
    "errors": {
        "PROJECT_NAME_TAKEN": "This project name is already taken.",
        "OWNER_ALREADY_EXISTS": "You already own a project. Only one is allowed per user.",
        "INVALID_PROJECT_NAME": (
            "The project name is invalid. Use only letters, numbers, and hyphens."
        ),
        "INVALID_IMAGE_URL": (
            "The provided Docker image URL is invalid or contains forbidden characters."
        ),
        "IMAGE_SCAN_FAILED": "Security scan failed: vulnerabilities were found in the image.",
        "CLIENT_ERROR": "An unexpected client-side error occurred. Please try again.",
        "DELETE_FAILED": "Failed to delete the project.",
        "HTTP_ERROR_500": (
            "An internal server error occurred. Please try again later or contact support."
        ),
        "UNAUTHORIZED": "Your session has expired. Please log in again.",
        "OWNER_CANNOT_BE_PARTICIPANT": "The project owner cannot be added as a participant.",
        "GITHUB_ACCOUNT_NOT_LINKED": (
            "Your GitHub account is not linked. You must link it to deploy from a repository."
        ),
        "GITHUB_REPO_NOT_ACCESSIBLE": (
            "The Hangar App does not have access to this repository. "
            "Please update your installation permissions. Then try again."
        ),
        "GITHUB_PACKAGE_NOT_PUBLIC": (
            "Direct deployment from ghcr.io failed. "
            "Please ensure your package is set to 'Public'."
        ),
        "DEFAULT": "An unexpected error occurred. Please contact an administrator.",
        "DATABASE_ALREADY_EXISTS": "You already own a database. Only one is allowed per user.",
        "LINK_FAILED": "Failed to link the database to the project.",
        "NOT_FOUND": "The requested resource was not found.",
    },
}

_FR: Dict[str, Dict[str, str]] = {
    "common": {
        "loading": "Chargement...",
        "error": "Une erreur est survenue.",
        "owner": "Propriétaire",
        "source_url": "URL source",
        "deployed_image": "Image déployée",
        "status": "Statut",
        "created_on": "Créé le : {date}",
        "back_to_home": "Retour à l'accueil",
        "cancel": "Annuler",
        "confirm": "Confirmer",
        "status_running": "En cours",
        "status_exited": "Terminé",
        "status_stopped": "Arrêté",
        "status_dead": "Mort",
        "status_restarting": "Redémarrage",
        "status_created": "Créé",
        "status_paused": "En pause",
        "status_unknown": "Inconnu",
    },
    "home": {
        "create_project_button": "Nouveau projet",
    },
    "create_project": {
        "title": "Créer un nouveau projet",
        "github_tab": "Depuis GitHub",
        "direct_tab": "Depuis une image Docker",
        "database_tab": "Base de données seule",
        "name_label": "Nom du projet",
        "participants_label": "Participants (optionnel)",
        "env_vars_label": "Variables d'environnement (optionnel)",
        "env_vars_help": "Une ligne CLÉ=VALEUR par variable.",
        "create_db_checkbox": "Créer et lier aussi une base de données",
        "missing_fields": "Veuillez remplir tous les champs obligatoires.",
        "submit_button": "Déployer",
        "submit_button_loading": "Déploiement...",
    },
    "project_dashboard": {
        "title": "Tableau de bord du projet",
        "visit_app_button": "Visiter l'application",
        "card_title_info": "Informations du projet",
        "card_title_controls": "Contrôles",
        "card_title_logs": "Logs",
        "card_title_metrics": "Métriques (en %)",
        "card_title_danger": "Zone de danger",
        "card_title_update_image": "Mettre à jour l'image",
        "card_title_rebuild": "Reconstruire depuis GitHub",
        "card_title_env_vars": "Gérer les Variables d'Environnement",
        "logs_placeholder": (
            "Cliquez sur 'Récupérer les logs' pour afficher les logs du conteneur"
        ),
        "logs_empty": (
            "Aucune sortie de log. Le conteneur n'écrit peut-être rien sur "
            "stdout/stderr, ou il est simplement silencieux."
        ),
        "logs_error": "Erreur lors de la récupération des logs : {error}",
        "delete_button": "Supprimer le projet",
        "confirm_delete": (
            "Êtes-vous sûr de vouloir supprimer définitivement le projet '{name}' ? "
            "Cette action est irréversible."
        ),
        "confirm_delete_db_warning": (
            "La base de données liée sera également supprimée définitivement."
        ),
        "start_button": "Démarrer",
        "stop_button": "Arrêter",
        "restart_button": "Redémarrer",
        "start_success": "Projet démarré avec succès !",
        "stop_success": "Projet arrêté avec succès !",
        "restart_success": "Projet redémarré avec succès !",
        "fetch_logs_button": "Récupérer les logs",
        "confirm_remove_participant": "Êtes-vous sûr de vouloir retirer {name} du projet ?",
        "no_participants": "Ce projet n'a aucun participant.",
    },
    "database": {
        "title": "Base de Données",
        "no_db_linked": "Aucune base de données n'est liée à ce projet.",
        "unlinked_db_found": "Vous avez une base de données existante non liée ('{name}').",
        "confirm_delete": (
            "Êtes-vous sûr de vouloir supprimer définitivement cette base de données ? "
            "Cette action est irréversible."
        ),
    },
    "errors": {
        "DEFAULT": "Une erreur inattendue est survenue. Veuillez contacter un administrateur.",
        "DELETE_FAILED": "La suppression du projet a échoué.",
        "PROJECT_NAME_TAKEN": "Ce nom de projet est déjà utilisé.",
        "INVALID_PROJECT_NAME": (
            "Le nom du projet est invalide. Utilisez uniquement des lettres, "
            "des chiffres et des tirets."
        ),
        "LINK_FAILED": "La liaison de la base de données au projet a échoué.",
        "NOT_FOUND": "La ressource demandée n'a pas été trouvée.",
        "UNAUTHORIZED": "Votre session a expiré. Veuillez vous reconnecter.",
        "OWNER_CANNOT_BE_PARTICIPANT": (
            "Le propriétaire du projet ne peut pas être ajouté comme participant."
        ),
        "DATABASE_ALREADY_EXISTS": (
            "Vous possédez déjà une base de données. Une seule est autorisée par utilisateur."
        ),
    },
}

_TABLES: Dict[str, Dict[str, Dict[str, str]]] = {"en": _EN, "fr": _FR}


class Translator:
    """Dotted-key lookup over one language table with English fallback."""

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        if language not in SUPPORTED_LANGUAGES:
            logger.warning("Unsupported language '%s', using '%s'", language, DEFAULT_LANGUAGE)
            language = DEFAULT_LANGUAGE
        self.language = language

    def get(self, key: str) -> Optional[str]:
        """Return the translation for *key*, or ``None`` if no table has it."""
        section, _, name = key.partition(".")
        for lang in (self.language, DEFAULT_LANGUAGE):
            value = _TABLES[lang].get(section, {}).get(name)
            if value is not None:
                return value
        return None

    def t(self, key: str, **params: object) -> str:
        """Translate *key* and fill ``{param}`` placeholders.

        A missing key renders as the key itself.
        """
        text = self.get(key)
        if text is None:
            logger.debug("Missing translation key '%s' (%s)", key, self.language)
            text = key
        for name, value in params.items():
            text = text.replace("{" + name + "}", str(value))
        return text

    def status(self, raw: str) -> str:
        """Translate a raw run-state; unrecognised states map to *Unknown*."""
        text = self.get(f"common.status_{raw}")
        if text is None:
            return self.t("common.status_unknown")
        return text

    def error(self, err: ApiError) -> str:
        """Translate an :class:`ApiError` code, falling back to ``DEFAULT``."""
        text = self.get(f"errors.{err.error_code}")
        if text is None:
            return self.t("errors.DEFAULT")
        return text
