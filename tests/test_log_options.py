"""Test the log option model."""

import pytest

from revview.config import Config
from revview.errors import InvalidOption
from revview.log_options import (
    FLAGS,
    OPTIONS,
    SWITCHES,
    FileHistoryOptions,
    LogOptions,
    describe,
    is_single_file,
    option_key,
    prepare_flags,
)

from conftest import FakeGit


def test_every_flag_has_a_default():
    """Test that each catalogue key is a LogOptions field with a default."""
    defaults = LogOptions()
    for key in FLAGS:
        defaults.get(key)
    assert len(FLAGS) == len(SWITCHES) + len(OPTIONS)
    assert defaults.max_count == 256
    assert defaults.L == []
    assert defaults.follow is False


def test_option_key_spellings():
    """Test that flag spellings map to their keys."""
    assert option_key('max-count') == 'max_count'
    assert option_key('--max-count') == 'max_count'
    assert option_key('-n') == 'max_count'
    assert option_key('--range') == 'rev_range'
    assert option_key('-L') == 'L'
    assert option_key('--') == 'path_args'
    with pytest.raises(InvalidOption):
        option_key('--bogus')


def test_set_normalizes_values():
    """Test value coercion on set."""
    options = LogOptions()
    options.set('max-count', '10')
    options.set('follow', 'true')
    options.set('L', ['-L1,5:a.py', '', '7,9:b.py'])
    options.set('author', '')
    assert options.max_count == 10
    assert options.follow is True
    assert options.L == ['1,5:a.py', '7,9:b.py']
    assert options.author is None


def test_diff_merges_is_enumerated():
    """Test that diff-merges only accepts the known modes."""
    options = LogOptions()
    options.set('diff-merges', 'remerge')
    assert options.diff_merges == 'remerge'
    with pytest.raises(InvalidOption):
        options.set('diff-merges', 'sometimes')


def test_deep_clone_equals_until_mutated():
    """Test dirty-tracking via clone and equality."""
    options = LogOptions(author='alice', L=['1,2:a.py'])
    clone = options.deep_clone()
    assert clone.equals(options)
    clone.L.append('3,4:a.py')
    assert not clone.equals(options)
    assert options.L == ['1,2:a.py']


@pytest.mark.parametrize('key,value', [
    ('follow', True),
    ('max_count', 5),
    ('author', 'bob'),
    ('path_args', ['src']),
])
def test_any_single_change_breaks_equality(key, value):
    """Test that mutating one key after cloning is detected."""
    options = FileHistoryOptions.from_values({}, Config())
    clone = options.deep_clone()
    assert clone.equals(options)
    clone.set(key, value)
    assert not clone.equals(options)


def test_profiles_stay_in_sync():
    """Test that set() writes both profiles while keeping their own defaults."""
    options = FileHistoryOptions.from_values({'author': 'alice'}, Config())
    assert options.single_file.diff_merges == 'combined'
    assert options.multi_file.diff_merges == 'first-parent'
    options.set('follow', True)
    assert options.get(True).follow and options.get(False).follow
    assert options.single_file.author == options.multi_file.author == 'alice'


def test_render_value():
    """Test rendering flags with their values."""
    assert FLAGS['follow'].render_value(True) == (False, '--follow')
    assert FLAGS['follow'].render_value(False) == (True, '--follow')
    assert FLAGS['author'].render_value(None) == (True, '--author=')
    assert FLAGS['author'].render_value('Jane Doe') == (False, "--author='Jane Doe'")
    assert FLAGS['L'].render_value(['1,2:a.py']) == (False, '-L1,2:a.py')
    assert FLAGS['path_args'].render_value(['a b', 'c']) == (False, "-- 'a b' c")
    assert FLAGS['path_args'].render_value([]) == (True, '--')


def test_render_default():
    """Test rendering values as prompt defaults."""
    assert FLAGS['L'].render_default(['1,2:a.py']) == '-L1,2:a.py'
    assert FLAGS['grep'].render_default(None) == ''
    assert FLAGS['max_count'].render_default(10) == '10'


def test_prepare_flags():
    """Test git-log flag rendering."""
    options = LogOptions(
        follow=True, merges=True, max_count=3, diff_merges='separate', author='alice', L=['1,2:a.py'],
    )
    assert prepare_flags(options, single_file=True) == [
        '-L1,2:a.py', '--follow', '--merges', '--first-parent', '-n3',
        '--diff-merges=separate', '-E', '--author=alice',
    ]
    assert '--follow' not in prepare_flags(options, single_file=False)


def test_describe_lists_effective_flags():
    """Test the human-readable option description."""
    lines = describe('/src/repo', LogOptions(author='nobody@nowhere', rev_range='a..b'), False)
    assert lines[0] == "Top-level path: '/src/repo'"
    assert lines[1] == "Revision range: 'a..b'"
    assert 'author=nobody@nowhere' in lines[2]


def test_is_single_file(repo_dir):
    """Test single-file detection."""
    git = FakeGit([repo_dir])
    assert is_single_file(git, repo_dir, ['src/app.py'], [])
    assert not is_single_file(git, repo_dir, ['src'], [])
    assert not is_single_file(git, repo_dir, ['a.py', 'b.py'], [])
    assert not is_single_file(git, repo_dir, [], [])
    assert is_single_file(git, repo_dir, [], ['1,2:a.py', '5,9:a.py'])
    assert not is_single_file(git, repo_dir, [], ['1,2:a.py', '5,9:b.py'])


def test_prompt():
    """Test prompt text for value entry."""
    assert FLAGS['author'].prompt() == '(Extended regular expression) --author'
    assert FLAGS['max_count'].prompt() == '--max-count'
