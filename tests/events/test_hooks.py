from listenerchain.events import Hook, HookFamily, hook_name, hooks_in


def test_hook_values_are_method_names():
    assert Hook.ON_OPEN.value == "on_open"
    assert Hook.POST_STMT_EXECUTE.value == "post_stmt_execute"
    assert all(hook.value.isidentifier() for hook in Hook)


def test_hook_families():
    assert hooks_in(HookFamily.RECORD) == [
        Hook.ON_LOAD,
        Hook.ON_PRE_LOAD,
        Hook.ON_SLEEP,
        Hook.ON_WAKE_UP,
    ]
    assert hooks_in(HookFamily.COLLECTION) == [
        Hook.ON_PRE_COLLECTION_DELETE,
        Hook.ON_COLLECTION_DELETE,
    ]
    assert len(hooks_in(HookFamily.CONNECTION)) == 5
    assert len(hooks_in(HookFamily.TRANSACTION)) == 6
    assert len(hooks_in(HookFamily.SAVEPOINT)) == 6
    assert len(hooks_in(HookFamily.STATEMENT)) == 14
    assert len(Hook) == 37


def test_family_of_individual_hooks():
    assert Hook.ON_OPEN.family is HookFamily.CONNECTION
    assert Hook.PRE_SAVEPOINT_ROLLBACK.family is HookFamily.SAVEPOINT
    assert Hook.POST_TRANSACTION_BEGIN.family is HookFamily.TRANSACTION
    assert Hook.PRE_ERROR.family is HookFamily.STATEMENT


def test_hook_name_resolution():
    assert hook_name(Hook.PRE_FETCH_ALL) == "pre_fetch_all"
    assert hook_name("on_cache_hit") == "on_cache_hit"
