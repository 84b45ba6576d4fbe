"""
Tests for the persisted token stores.

Tests cover:
- Delimiter and format validation shared by every store
- Expiration handling
- File jar persistence and corruption tolerance
- aiohttp cookie store
"""
import time

import pytest
from aiohttp import web
from aiohttp.test_utils import make_mocked_request

from navigator_profiles.exceptions import StorageFormatViolation
from navigator_profiles.storage import (
    CookieTokenStore,
    FileTokenStore,
    MemoryTokenStore,
    validate_token,
)

TOKEN = 'BENCRYPTIONTOKEN'


# --- Test Validation ---

class TestValidateToken:

    @pytest.mark.parametrize('value', [
        'a;b', 'a=b', 'a,b', 'a b', 'a\nb', 'a\rb', 'a\tb', '',
    ])
    def test_reserved_values_rejected(self, value):
        with pytest.raises(StorageFormatViolation):
            validate_token(TOKEN, value)

    def test_reserved_name_rejected(self):
        with pytest.raises(StorageFormatViolation):
            validate_token('bad=name', 'value')

    def test_non_string_rejected(self):
        with pytest.raises(StorageFormatViolation):
            validate_token(TOKEN, None)

    def test_hex_value_accepted(self):
        validate_token(TOKEN, 'ab12' * 16)

    def test_violation_is_value_error(self):
        with pytest.raises(ValueError):
            validate_token(TOKEN, 'a;b')


# --- Test Memory Store ---

class TestMemoryTokenStore:

    @pytest.mark.asyncio
    async def test_write_read_remove(self):
        store = MemoryTokenStore()
        assert await store.read(TOKEN) is None
        await store.write(TOKEN, 'secret', 1000)
        assert await store.read(TOKEN) == 'secret'
        await store.remove(TOKEN)
        assert await store.read(TOKEN) is None

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self):
        store = MemoryTokenStore()
        await store.remove(TOKEN)
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delimiter_rejected_before_persisting(self):
        store = MemoryTokenStore()
        with pytest.raises(StorageFormatViolation):
            await store.write(TOKEN, 'evil;path=/', 1000)
        assert await store.read(TOKEN) is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delimiter_does_not_clobber_existing(self):
        store = MemoryTokenStore()
        await store.write(TOKEN, 'good', 1000)
        with pytest.raises(StorageFormatViolation):
            await store.write(TOKEN, 'a=b', 1000)
        assert await store.read(TOKEN) == 'good'

    @pytest.mark.asyncio
    async def test_non_positive_ttl_rejected(self):
        store = MemoryTokenStore()
        with pytest.raises(ValueError):
            await store.write(TOKEN, 'secret', 0)

    @pytest.mark.asyncio
    async def test_expired_token_reads_none(self, monkeypatch):
        store = MemoryTokenStore()
        await store.write(TOKEN, 'secret', 1)
        later = time.time() + 2 * 24 * 60 * 60
        monkeypatch.setattr(time, 'time', lambda: later)
        assert await store.read(TOKEN) is None


# --- Test File Store ---

class TestFileTokenStore:

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = tmp_path / 'jar' / 'tokens'
        await FileTokenStore(path).write(TOKEN, 'secret', 1000)
        assert await FileTokenStore(path).read(TOKEN) == 'secret'

    @pytest.mark.asyncio
    async def test_cookie_line_format(self, tmp_path):
        path = tmp_path / 'tokens'
        await FileTokenStore(path).write(TOKEN, 'secret', 1)
        line = path.read_text().strip()
        assert line.startswith(f'{TOKEN}=secret; expires=')
        expires = int(line.rsplit('=', 1)[1])
        assert abs(expires - (time.time() + 86400)) < 60

    @pytest.mark.asyncio
    async def test_keeps_other_tokens(self, tmp_path):
        store = FileTokenStore(tmp_path / 'tokens')
        await store.write('OTHER', 'x', 5)
        await store.write(TOKEN, 'secret', 5)
        await store.remove(TOKEN)
        assert await store.read('OTHER') == 'x'
        assert await store.read(TOKEN) is None

    @pytest.mark.asyncio
    async def test_remove_missing_file(self, tmp_path):
        store = FileTokenStore(tmp_path / 'tokens')
        await store.remove(TOKEN)
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_delimiter_rejected_before_persisting(self, tmp_path):
        store = FileTokenStore(tmp_path / 'tokens')
        with pytest.raises(StorageFormatViolation):
            await store.write(TOKEN, 'x\nINJECTED=1; expires=9999999999', 5)
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_expired_record(self, tmp_path):
        path = tmp_path / 'tokens'
        path.write_text(f'{TOKEN}=secret; expires={int(time.time()) - 10}\n')
        assert await FileTokenStore(path).read(TOKEN) is None

    @pytest.mark.asyncio
    async def test_corrupt_lines_skipped(self, tmp_path, caplog):
        path = tmp_path / 'tokens'
        future = int(time.time()) + 3600
        path.write_text(
            'garbage line\n'
            f'{TOKEN}=secret; expires={future}\n'
            'X=y; expires=soon\n'
        )
        assert await FileTokenStore(path).read(TOKEN) == 'secret'
        assert 'corrupt token record' in caplog.text


# --- Test Cookie Store ---

class TestCookieTokenStore:

    @pytest.mark.asyncio
    async def test_reads_request_cookie(self):
        request = make_mocked_request(
            'GET', '/', headers={'Cookie': f'{TOKEN}=secret'}
        )
        store = CookieTokenStore(request, web.Response())
        assert await store.read(TOKEN) == 'secret'

    @pytest.mark.asyncio
    async def test_missing_cookie(self):
        store = CookieTokenStore(make_mocked_request('GET', '/'), web.Response())
        assert await store.read(TOKEN) is None

    @pytest.mark.asyncio
    async def test_write_sets_cookie(self):
        response = web.Response()
        store = CookieTokenStore(make_mocked_request('GET', '/'), response)
        await store.write(TOKEN, 'secret', 1000)
        morsel = response.cookies[TOKEN]
        assert morsel.value == 'secret'
        assert morsel['max-age'] == str(1000 * 86400)
        assert morsel['path'] == '/'
        assert morsel['httponly']
        assert await store.read(TOKEN) == 'secret'

    @pytest.mark.asyncio
    async def test_remove_expires_cookie(self):
        request = make_mocked_request(
            'GET', '/', headers={'Cookie': f'{TOKEN}=secret'}
        )
        response = web.Response()
        store = CookieTokenStore(request, response)
        await store.remove(TOKEN)
        assert response.cookies[TOKEN]['max-age'] == '0'
        assert await store.read(TOKEN) is None

    @pytest.mark.asyncio
    async def test_delimiter_rejected(self):
        response = web.Response()
        store = CookieTokenStore(make_mocked_request('GET', '/'), response)
        with pytest.raises(StorageFormatViolation):
            await store.write(TOKEN, 'a;b', 1000)
        assert TOKEN not in response.cookies
