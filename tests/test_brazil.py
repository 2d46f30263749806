import unicodedata

import pytest

from idcheck.models import Outcome


@pytest.fixture
def personal(check):
    return lambda field, value, region=None: check("BR", "personal", field, value, region).valid

@pytest.fixture
def company(check):
    return lambda field, value: check("BR", "company", field, value).valid

@pytest.fixture
def bank(check):
    return lambda field, value: check("BR", "bank", field, value).valid

@pytest.fixture
def vehicle(check):
    return lambda field, value: check("BR", "vehicle", field, value).valid

@pytest.fixture
def currency(check):
    return lambda field, value: check("BR", "currency", field, value).valid


# ---- personal ----

def test_cpf(personal):
    assert personal("cpf", "123.456.789-09")
    assert personal("cpf", "12345678909")
    assert not personal("cpf", "111.111.111-11")
    assert not personal("cpf", "123.456.789-00")

def test_cin_follows_cpf(personal):
    assert personal("cin", "123.456.789-09")
    assert not personal("cin", "111.111.111-11")

def test_rg_by_state(personal):
    assert personal("rg", "12345678", "SP")
    assert personal("rg", "123456789", "SP")
    assert personal("rg", "1234567X", "SP")
    assert personal("rg", "12345678X", "SP")
    assert personal("rg", "123456789", "RJ")
    assert personal("rg", "1234567890", "RS")
    assert personal("rg", "12345678", "BA")

def test_rg_rejections(personal):
    assert not personal("rg", "1234", "SP")
    assert not personal("rg", "1234567890", "SP")
    assert not personal("rg", "1234567A", "SP")
    assert not personal("rg", "12345678901", "RS")
    assert not personal("rg", "", "SP")
    assert not personal("rg", "1234-567", "SP")
    assert not personal("rg", "1234567890", "BA")

def test_rg_needs_a_state(check):
    assert check("BR", "personal", "rg", "12345678").kind is Outcome.unknown_rule
    assert check("BR", "personal", "rg", "12345678", "XX").kind is Outcome.unknown_rule

def test_cns(personal):
    for value in ("123456789012345", "223456789012345", "700123456789012", "800123456789012", "900123456789012"):
        assert personal("cns", value)
    assert not personal("cns", "000000000000000")
    assert not personal("cns", "323456789012345")
    assert not personal("cns", "12345678901234")
    assert not personal("cns", "1234567890123456")

def test_birth_date(personal):
    assert personal("birth_date", "2000-01-01")
    assert not personal("birth_date", "3000-01-01")
    assert not personal("birth_date", "2000-13-01")
    assert not personal("birth_date", "2001-02-29")

def test_full_name(personal):
    assert personal("full_name", "John Doe")
    assert personal("full_name", "José da Silva-Sauro")
    assert not personal("full_name", "John")
    assert not personal("full_name", "")
    assert not personal("full_name", "R2 D2")

def test_full_name_decomposed_accents(personal):
    assert personal("full_name", unicodedata.normalize("NFD", "José Conceição"))
    assert personal("full_name", "Maria D'Ávila")

def test_pis_pasep(personal):
    assert personal("pis_pasep", "639.22570.10-6")
    assert personal("pis_pasep", "51847159587")
    assert not personal("pis_pasep", "123.45678.90-2")
    assert not personal("pis_pasep", "111.11111.11-1")
    assert not personal("pis_pasep", "12345")
    assert not personal("pis_pasep", "1234567890123")
    assert not personal("pis_pasep", "000.00000.00-0")

def test_voter_registration(personal):
    assert personal("voter_registration", "558055510652")
    assert personal("voter_registration", "280567082087")
    assert not personal("voter_registration", "12345678901")
    assert not personal("voter_registration", "1234567890123")
    assert not personal("voter_registration", "111111111111")
    assert not personal("voter_registration", "123456789013")

def test_email(personal):
    assert personal("email", "email@example.com")
    assert personal("email", " email@example.com ")
    assert not personal("email", "invalid-email.com")
    assert not personal("email", "email@.com")

def test_cnh(personal):
    assert personal("cnh", "12345678900")
    assert not personal("cnh", "12345678901")
    assert not personal("cnh", "11111111111")

def test_passport(personal):
    assert personal("passport", "AB123456")
    assert not personal("passport", "ABC1234567")
    assert not personal("passport", "12345678")

def test_phone(personal):
    assert personal("phone", "(11) 98765-4321")
    assert personal("phone", "11987654321")
    assert personal("phone", "(11) 8765-4321")
    assert not personal("phone", "12345-6789")
    assert not personal("phone", "(11) 9876-54321")
    assert not personal("phone", "(11) 9765-4321")
    assert not personal("phone", "(00) 98765-4321")
    assert not personal("phone", "(11) 98765-432A")

def test_phone_without_area_code(personal):
    assert personal("phone_without_area_code", "987654321")
    assert personal("phone_without_area_code", "23456789")
    assert personal("phone_without_area_code", "3456-7890")
    assert personal("phone_without_area_code", "98765-4321")
    assert not personal("phone_without_area_code", "12345678")
    assert not personal("phone_without_area_code", "(11) 98765-4321")
    assert not personal("phone_without_area_code", "9876543210")
    assert not personal("phone_without_area_code", "1234567")
    assert not personal("phone_without_area_code", "98765A4321")
    assert not personal("phone_without_area_code", "98765432")
    assert not personal("phone_without_area_code", "")


# ---- company ----

def test_cnpj(company):
    assert company("cnpj", "12.345.678/0001-95")
    assert company("cnpj", "12345678000195")
    assert not company("cnpj", "12.345.678/0001-96")
    assert not company("cnpj", "1234567890123")
    assert not company("cnpj", "11111111111111")

def test_corporate_name(company):
    assert company("corporate_name", "Valid Company Name Ltda.")
    assert company("corporate_name", "Silva & Filhos (Comércio)")
    assert not company("corporate_name", "A")
    assert not company("corporate_name", "Invalid@Name!")

def test_company_contact(company):
    assert company("phone", "(11) 98765-4321")
    assert company("phone_without_area_code", "2765-4321")
    assert not company("phone_without_area_code", "2765-432A")
    assert company("email", "contact@company.com")
    assert company("email", "info@domain.co")
    assert not company("email", "invalid-email@com")
    assert not company("email", "invalid@.com")

def test_state_registration(company):
    assert company("state_registration", "123456789")
    assert company("state_registration", "12345678901234")
    assert not company("state_registration", "12345678")
    assert not company("state_registration", "123456789012345")

def test_nire(company):
    assert company("nire", "12345678901")
    assert not company("nire", "1234567890")
    assert not company("nire", "123456789012")
    assert not company("nire", "ABCDEFGHIJK")


# ---- bank ----

def test_bank_code_and_branch(bank):
    assert bank("bank_code", "001")
    assert bank("bank_code", "341")
    assert not bank("bank_code", "34A")
    assert not bank("bank_code", "12")
    assert bank("branch", "1234")
    assert not bank("branch", "123")
    assert not bank("branch", "12345")
    assert not bank("branch", "ABCD")

def test_account_number(bank):
    assert bank("account_number", "123456-7")
    assert bank("account_number", "12345-6")
    assert not bank("account_number", "1234567")
    assert not bank("account_number", "12345-67")

def test_boleto(bank):
    assert bank("boleto", "1" * 47)
    assert bank("boleto", "  " + "1" * 47 + "  ")
    assert not bank("boleto", "1234A" + "1" * 43)
    assert not bank("boleto", "1234-5678.9012/3456 7890 1234 5678 9012 3456 7")
    assert not bank("boleto", "")
    assert not bank("boleto", "      ")

def test_compensation_code_and_bin(bank):
    assert bank("compensation_code", "12345678")
    assert not bank("compensation_code", "1234567")
    assert bank("bin", "123456")
    assert not bank("bin", "1234567")

def test_card_number(bank):
    assert bank("card_number", "4539578763621486")
    assert bank("card_number", "4539 5787 6362 1486")
    assert not bank("card_number", "1234567890123456")
    assert not bank("card_number", "0000000000000000")

def test_ispb(bank):
    for code in ("00000000", "00000208", "00122327", "00204963", "00250699", "00315557", "00360305", "00416968"):
        assert bank("ispb", code)
    assert not bank("ispb", "12345678")
    assert not bank("ispb", "1234567")
    assert not bank("ispb", "123456789")
    assert not bank("ispb", "ABCDEFGH")
    assert not bank("ispb", "0036030A")
    assert not bank("ispb", "")

def test_swift(bank):
    assert bank("swift", "DEUTDEFF")
    assert bank("swift", "DEUTDEFF500")
    assert not bank("swift", "DEUTDEFFF")

def test_iban(bank):
    assert bank("iban", "BR1500000000000010932840814P2")
    assert bank("iban", " BR1500000000000010932840814P2 ")
    assert bank("iban", "BR15 0000 0000 0000 1093 2840 814P 2")
    assert not bank("iban", "BR1500000000000010932840814P3")
    assert not bank("iban", "BR1500000000000010932840814P@")
    assert not bank("iban", "BR1500000000000010932840814")
    assert not bank("iban", "BR1500000000000010932840814P200000000000000")
    assert not bank("iban", "123456789012345678901234567890")
    assert not bank("iban", "BR1500000000000010932840814P2#")
    assert not bank("iban", "")


# ---- vehicle ----

def test_plate(vehicle):
    assert vehicle("plate", "ABC1234")
    assert vehicle("plate", "ABC1D23")
    assert vehicle("plate", "abc-1234")
    assert not vehicle("plate", "AB12345")
    assert not vehicle("plate", "1234ABC")

def test_renavam(vehicle):
    for value in ("94473163410", "21714422129", "34457909379", "13939262004", "73553865159"):
        assert vehicle("renavam", value)
    assert not vehicle("renavam", "1234567890")
    assert not vehicle("renavam", "123456789012")
    assert not vehicle("renavam", "ABCDEFGHIJK")
    assert not vehicle("renavam", "00000000000")
    assert not vehicle("renavam", "94473163411")

def test_chassis(vehicle):
    assert vehicle("chassis", "1HGCM82633A004352")
    assert vehicle("chassis", "5YJSA1CN6DFP12345")
    assert vehicle("chassis", "JN1BY1AR4BM602581")
    assert not vehicle("chassis", "1HGCM82633A00435")
    assert not vehicle("chassis", "1HGCM82633A00435222")
    assert not vehicle("chassis", "1HGCM82633I004352")
    assert not vehicle("chassis", "1HGCM82633A00435X")
    assert not vehicle("chassis", "Q9ABCDEF123456789")

def test_category(vehicle):
    for c in "ABCDE":
        assert vehicle("category", c)
    assert not vehicle("category", "Z")
    assert not vehicle("category", "1")


# ---- currency formats ----

def test_brl_format(currency):
    assert currency("brl_format", "R$ 1.234,56")
    assert currency("brl_format", "R$123,45")
    assert not currency("brl_format", "1234,56")
    assert not currency("brl_format", "R$ 1234.56")

def test_numeric_format(currency):
    assert currency("numeric_format", "1.234,56")
    assert currency("numeric_format", "123,45")
    assert not currency("numeric_format", "1234.56")
    assert not currency("numeric_format", "1,234.56")

def test_exchange_rate(currency):
    assert currency("exchange_rate", "5.4321")
    assert currency("exchange_rate", "123")
    assert not currency("exchange_rate", "5,4321")
    assert not currency("exchange_rate", "5.43210")
