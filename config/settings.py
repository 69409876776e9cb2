#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Konfiguracja klienta POS Admin
Panel administracyjny systemu POS (restauracja / sklep)

UWAGA: W produkcji użyj pliku .env dla adresu API i ścieżek!
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Wczytaj zmienne środowiskowe z .env
load_dotenv()

# ============================================================
# API - KONFIGURACJA POŁĄCZENIA
# ============================================================

API_BASE_URL = os.getenv("POS_API_BASE_URL", "https://localhost:7115/")

# Timeout pojedynczego requestu (sekundy)
REQUEST_TIMEOUT = float(os.getenv("POS_API_TIMEOUT", "30"))

# Retry - stała liczba ponowień i stałe opóźnienie (bez backoff)
MAX_RETRIES = int(os.getenv("POS_API_MAX_RETRIES", "3"))
RETRY_DELAY = float(os.getenv("POS_API_RETRY_DELAY", "1.0"))

# Certyfikat dev-serwera .NET jest zwykle self-signed
VERIFY_SSL = os.getenv("POS_API_VERIFY_SSL", "true").lower() == "true"

# Mnożniki timeoutu dla uploadów
UPLOAD_TIMEOUT_MULTIPLIER = 2
UPLOAD_MULTIPLE_TIMEOUT_MULTIPLIER = 3

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# ============================================================
# ENDPOINTY
# ============================================================

ENDPOINTS = {
    "CUSTOMERS": "api/Customers",
    "CUSTOMER_GROUPS": "api/CustomerGroups",
    "PRODUCTS": "api/Products",
    "PRODUCT_SIZES": "api/Products/sizes",
    "PRODUCT_COMBOS": "api/Products/combos",
    "PRODUCT_GROUPS": "api/ProductGroups",
    "PRODUCT_CATEGORIES": "api/ProductCategories",
    "PRODUCT_TREES": "api/producttrees",
    "ACCOMPANIMENTS": "api/accompaniments",
    "COMBOS": "api/Combos",
    "VARIANTS": "api/Products/{code}/Variants",
    "DEVICES": "api/devices",
    "POINT_OF_SALES": "api/PointOfSales",
    "IMAGES": "api/images",
    "ORDERS": "api/order",
    "HEALTH": "api/health",
    "AUTH_LOGIN": "api/auth/login",
    "AUTH_LOGOUT": "api/auth/logout",
}

# ============================================================
# LISTY / PAGINACJA
# ============================================================

DEFAULT_PAGE_SIZE = int(os.getenv("POS_DEFAULT_PAGE_SIZE", "10"))

# Limit rekordów pobieranych przy eksporcie
EXPORT_PAGE_SIZE = 10000

# Liczba równoległych requestów w operacjach masowych
BULK_MAX_WORKERS = int(os.getenv("POS_BULK_MAX_WORKERS", "4"))

# ============================================================
# OBRAZY - LIMITY UPLOADU
# ============================================================

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

MAX_IMAGE_SIZE_MB = 5
MAX_IMAGE_SIZE = MAX_IMAGE_SIZE_MB * 1024 * 1024

# ============================================================
# SESJA
# ============================================================

# Katalog cache (plik sesji)
CACHE_DIR = Path(os.getenv("CACHE_DIR", Path.home() / ".posadmin_cache"))

# Token + dane użytkownika zapisywane między uruchomieniami
SESSION_FILE = CACHE_DIR / "session.json"

# ============================================================
# KODY
# ============================================================

CUSTOMER_GROUP_CODE_PREFIX = "CG"
CUSTOMER_CODE_PREFIX = "C"
POS_CODE_PREFIX = "POS"
DEVICE_CODE_PREFIX = "DEV"


# ============================================================
# WALIDACJA KONFIGURACJI
# ============================================================

def validate_config():
    """
    Sprawdź czy konfiguracja jest poprawna.
    Wywołaj przy starcie aplikacji.
    """
    errors = []

    if not API_BASE_URL:
        errors.append("POS_API_BASE_URL nie jest ustawiony")
    elif not API_BASE_URL.startswith(("http://", "https://")):
        errors.append("POS_API_BASE_URL musi zaczynać się od http:// lub https://")

    if REQUEST_TIMEOUT <= 0:
        errors.append("POS_API_TIMEOUT musi być dodatni")

    if MAX_RETRIES < 0:
        errors.append("POS_API_MAX_RETRIES nie może być ujemny")

    if RETRY_DELAY < 0:
        errors.append("POS_API_RETRY_DELAY nie może być ujemny")

    if errors:
        raise ValueError(f"Błędy konfiguracji: {', '.join(errors)}")

    return True


if __name__ == "__main__":
    print("=" * 60)
    print("KONFIGURACJA POS Admin")
    print("=" * 60)
    print(f"API URL: {API_BASE_URL}")
    print(f"Timeout: {REQUEST_TIMEOUT}s, retries: {MAX_RETRIES}")
    print(f"Session file: {SESSION_FILE}")

    try:
        validate_config()
        print("[OK] Konfiguracja poprawna")
    except ValueError as e:
        print(f"[ERROR] {e}")
